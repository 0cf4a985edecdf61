"""
Authentication module for PP Quest.

Handles PIN-based login to the local profile with bcrypt hashing.
"""

import bcrypt

from ppquest.models import AppState
from ppquest.storage import clear_state


def hash_pin(pin: str) -> str:
    """
    Hash a PIN using bcrypt with automatic salt generation.

    Args:
        pin: The plaintext PIN to hash

    Returns:
        The bcrypt hash as a string

    Example:
        >>> pin_hash = hash_pin("1234")
        >>> pin_hash != "1234"  # Hash never equals plaintext
        True
    """
    pin_bytes = pin.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pin_bytes, salt)
    return hashed.decode('utf-8')


def verify_pin(pin: str, pin_hash: str) -> bool:
    """
    Verify a PIN against a stored bcrypt hash.

    Args:
        pin: The plaintext PIN to verify
        pin_hash: The stored bcrypt hash

    Returns:
        True if PIN matches hash, False otherwise
    """
    try:
        return bcrypt.checkpw(pin.encode('utf-8'), pin_hash.encode('utf-8'))
    except ValueError:
        # Invalid hash format
        return False


def login(state: AppState, username: str, pin: str) -> AppState | None:
    """
    Log in to the local profile, creating it on first use.

    This function implements create-or-login logic:
    1. If no profile has been claimed yet: hash PIN, store username and hash
    2. If a profile exists: username must match and PIN must verify
    3. On success: return a new state with the user logged in
    4. On failure: return None

    Args:
        state: Current application state
        username: Name entered on the login form
        pin: The plaintext PIN

    Returns:
        Logged-in AppState on success, None on authentication failure
    """
    username = username.strip()
    if not username or not pin:
        return None

    new_state = state.model_copy(deep=True)
    user = new_state.user

    if user.pin_hash is None:
        user.username = username
        user.pin_hash = hash_pin(pin)
    elif user.username != username or not verify_pin(pin, user.pin_hash):
        return None

    user.is_logged_in = True
    return new_state


def logout(store) -> None:
    """
    Log out by wiping the persisted profile and progress.

    Args:
        store: Byte store holding the state snapshot

    Raises:
        PersistenceError: If the snapshot cannot be removed
    """
    clear_state(store)
