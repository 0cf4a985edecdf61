"""
Unit tests for authentication module.
"""

from ppquest.auth import hash_pin, verify_pin, login, logout
from ppquest.models import AppState
from ppquest.storage import FileStore, STORAGE_KEY, save_state


class TestPinHashing:
    """Test PIN hashing functionality."""

    def test_hash_pin_returns_different_value(self):
        """Hash should never equal plaintext PIN."""
        pin = "1234"
        pin_hash = hash_pin(pin)
        assert pin_hash != pin

    def test_hash_pin_returns_string(self):
        """Hash should return a string."""
        assert isinstance(hash_pin("test_pin"), str)

    def test_hash_pin_different_salts(self):
        """Same PIN should produce different hashes due to different salts."""
        assert hash_pin("1234") != hash_pin("1234")


class TestPinVerification:
    """Test PIN verification functionality."""

    def test_verify_pin_correct_pin(self):
        """Correct PIN should verify successfully."""
        pin_hash = hash_pin("correct_pin")
        assert verify_pin("correct_pin", pin_hash) is True

    def test_verify_pin_incorrect_pin(self):
        """Incorrect PIN should fail verification."""
        pin_hash = hash_pin("correct_pin")
        assert verify_pin("wrong_pin", pin_hash) is False

    def test_verify_pin_invalid_hash(self):
        """Invalid hash format should return False."""
        assert verify_pin("any_pin", "invalid_hash") is False


class TestLogin:
    """Test create-or-login of the local profile."""

    def test_first_login_creates_profile(self):
        """First login claims the profile and stores a hashed PIN."""
        state = AppState()

        new_state = login(state, "alice", "1234")

        assert new_state is not None
        assert new_state.user.username == "alice"
        assert new_state.user.is_logged_in is True
        assert new_state.user.pin_hash != "1234"
        assert verify_pin("1234", new_state.user.pin_hash)

    def test_login_does_not_mutate_input(self):
        """The passed-in state is left untouched."""
        state = AppState()

        login(state, "alice", "1234")

        assert state.user.username is None
        assert state.user.is_logged_in is False

    def test_returning_user_correct_pin(self):
        """Existing profile with correct PIN logs in and keeps progress."""
        state = login(AppState(), "alice", "1234")
        state.user.is_logged_in = False
        state.stats.completed = 7

        new_state = login(state, "alice", "1234")

        assert new_state is not None
        assert new_state.user.is_logged_in is True
        assert new_state.stats.completed == 7

    def test_returning_user_wrong_pin(self):
        """Existing profile with a wrong PIN is rejected."""
        state = login(AppState(), "alice", "1234")
        state.user.is_logged_in = False

        assert login(state, "alice", "9999") is None

    def test_other_username_rejected(self):
        """A different name cannot take over a claimed profile."""
        state = login(AppState(), "alice", "1234")
        state.user.is_logged_in = False

        assert login(state, "mallory", "1234") is None

    def test_blank_credentials_rejected(self):
        """Empty username or PIN never logs in."""
        assert login(AppState(), "   ", "1234") is None
        assert login(AppState(), "alice", "") is None

    def test_username_is_trimmed(self):
        """Surrounding whitespace is not part of the username."""
        new_state = login(AppState(), "  alice ", "1234")
        assert new_state.user.username == "alice"


class TestLogout:
    """Test logout."""

    def test_logout_clears_snapshot(self, tmp_path):
        """Logout removes the persisted state."""
        store = FileStore(tmp_path)
        save_state(AppState(), store)
        assert store.get(STORAGE_KEY) is not None

        logout(store)

        assert store.get(STORAGE_KEY) is None
