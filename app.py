"""
PP Quest - Main Streamlit Application

This is the main entry point for the PP Quest daily side-quest app.
Orchestrates login, quest refresh, proof submission and UI rendering.
Every state change goes through one ledger function and is persisted
right after.
"""

import logging
import time

import streamlit as st

from ppquest import oracle
from ppquest.analytics import send_badge_metric, send_quest_metric
from ppquest.auth import login, logout
from ppquest.ledger import (
    record_failure,
    record_success,
    replace_active_quests,
    toggle_saved,
    update_setting,
)
from ppquest.models import AppState
from ppquest.storage import FileStore, PersistenceError, load_state, save_state
from ppquest.submissions import judge_submission
from ppquest.ui_components import (
    badge_title,
    render_completed_card,
    render_header,
    render_quest_card,
    render_sidebar_auth,
    render_stats,
    render_vault,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="PP Quest",
    page_icon="🎯",
    layout="centered"
)

DEFAULT_STORAGE_DIR = ".ppquest"


def get_secret(name: str, default=None):
    """Read a value from Streamlit secrets, falling back to ``default``."""
    try:
        return st.secrets.get(name, default)
    except Exception as e:
        logger.warning(f"Secrets unavailable, using default for {name}: {e}")
        return default


def get_store() -> FileStore:
    return FileStore(get_secret("storage_dir", DEFAULT_STORAGE_DIR))


def initialize_session_state(store):
    """Initialize Streamlit session state with default values.

    Session state fields:
    - app_state: AppState - the snapshot loaded from the store
    - pending_badges: list[str] - unlocked badges not yet announced
    - quest_started_at: dict[str, float] - when each active quest was first shown
    """
    if "app_state" not in st.session_state:
        st.session_state.app_state = load_state(store)
    if "pending_badges" not in st.session_state:
        st.session_state.pending_badges = []
    if "quest_started_at" not in st.session_state:
        st.session_state.quest_started_at = {}


def commit(new_state: AppState, store, unlocked=None, datadog_api_key=None) -> None:
    """Adopt a state produced by the ledger and persist it.

    Newly unlocked badges are queued for a one-time announcement.
    """
    st.session_state.app_state = new_state
    if unlocked:
        st.session_state.pending_badges.extend(unlocked)
        if datadog_api_key:
            for badge_id in unlocked:
                send_badge_metric(badge_id, datadog_api_key)
    try:
        save_state(new_state, store)
    except PersistenceError as e:
        logger.error(f"Failed to persist state: {e}")
        st.error("Unable to save your progress. Please try again.")


def handle_authentication(store):
    """Handle login from the sidebar form submission."""
    if "auth_submission" in st.session_state:
        auth_data = st.session_state["auth_submission"]
        username = auth_data.get("username", "").strip()
        pin = auth_data.get("pin", "").strip()

        del st.session_state["auth_submission"]

        if not username or not pin:
            st.sidebar.error("Please enter both username and PIN")
            return

        new_state = login(st.session_state.app_state, username, pin)
        if new_state is None:
            st.sidebar.error("Invalid username or PIN")
            return

        commit(new_state, store)
        st.rerun()


def handle_refresh(store, is_auto: bool):
    """Fetch a new batch of quests and replace the active set.

    A failed generation leaves the current quests untouched.
    """
    state = st.session_state.app_state
    with st.spinner("Updating reality..."):
        quests = oracle.generate_daily_quests(state.user.language)

    if not quests:
        st.error("Could not summon new quests. Try again in a moment.")
        return

    st.session_state.quest_started_at = {}
    commit(replace_active_quests(st.session_state.app_state, quests, consumes_manual_refresh=not is_auto), store)
    st.rerun()


def handle_quest_submission(quest, store, datadog_api_key):
    """Judge a submitted proof and record the outcome in the ledger."""
    submission_key = f"submission_{quest.id}"

    if submission_key not in st.session_state:
        return

    submission = st.session_state[submission_key]
    del st.session_state[submission_key]

    state = st.session_state.app_state
    with st.spinner("The Quest Master is judging..."):
        result = judge_submission(
            quest,
            state.user.language,
            text=submission.get("text"),
            image=submission.get("image"),
            mime_type=submission.get("mime_type") or "image/jpeg",
            location_consent=submission.get("location_consent", False),
            choice=submission.get("choice"),
        )

    if not result.success:
        st.session_state.flash = ("error", f"⚠️ {result.feedback}")
        commit(record_failure(st.session_state.app_state), store)
        st.rerun()

    started_at = st.session_state.quest_started_at.pop(quest.id, time.time())
    duration = int(time.time() - started_at)
    new_state, unlocked = record_success(
        st.session_state.app_state, quest.id, result.proof, result.feedback, duration
    )
    commit(new_state, store, unlocked, datadog_api_key)

    if datadog_api_key:
        send_quest_metric(quest, datadog_api_key)

    st.session_state.flash = ("success", f'✅ +{quest.points} XP: "{result.feedback}"')
    st.rerun()


def handle_toggle_saved(store, datadog_api_key):
    if "toggle_saved" in st.session_state:
        quest_id = st.session_state["toggle_saved"]
        del st.session_state["toggle_saved"]
        new_state, unlocked = toggle_saved(st.session_state.app_state, quest_id)
        commit(new_state, store, unlocked, datadog_api_key)
        st.rerun()


def announce_badges():
    """Show each newly unlocked badge exactly once."""
    pending = st.session_state.pending_badges
    st.session_state.pending_badges = []
    for badge_id in pending:
        st.toast(f"Unlocked Badge! {badge_title(badge_id)}", icon="🏅")


def render_settings(store):
    state = st.session_state.app_state
    st.sidebar.success(f"Logged in as: **{state.user.username}**")

    languages = ["en", "sr"]
    language = st.sidebar.selectbox(
        "Language", languages, index=languages.index(state.user.language), format_func=str.upper
    )
    if language != state.user.language:
        commit(update_setting(state, "language", language), store)
        st.sidebar.info("New quests will use the new language after a refresh.")

    themes = ["dark", "light"]
    theme = st.sidebar.radio("Theme", themes, index=themes.index(state.user.theme), horizontal=True)
    if theme != st.session_state.app_state.user.theme:
        commit(update_setting(st.session_state.app_state, "theme", theme), store)

    if st.sidebar.button("Logout"):
        try:
            logout(store)
        except PersistenceError as e:
            logger.error(f"Logout failed: {e}")
            st.sidebar.error("Unable to clear your profile. Please try again.")
            return
        for key in list(st.session_state.keys()):
            del st.session_state[key]
        st.rerun()


def render_quests_tab(store, datadog_api_key):
    state = st.session_state.app_state

    col1, col2 = st.columns([3, 1])
    with col1:
        st.header("🎯 The Hunt")
        st.caption("Fresh side quests. Prove it or lose your streak.")
    with col2:
        out_of_refreshes = state.user.refreshes_left == 0 and not state.user.is_premium
        if st.button(f"Refresh ({state.user.refreshes_left})", disabled=out_of_refreshes):
            handle_refresh(store, is_auto=False)

    for quest in list(st.session_state.app_state.active_quests):
        st.session_state.quest_started_at.setdefault(quest.id, time.time())
        render_quest_card(quest)
        handle_quest_submission(quest, store, datadog_api_key)

    if "share_text" in st.session_state:
        st.code(st.session_state.pop("share_text"), language=None)

    completed = st.session_state.app_state.completed_quests
    if completed:
        st.divider()
        st.subheader("Today's Achievements")
        for completion in completed:
            render_completed_card(completion)


def main():
    """Main application entry point.

    Orchestrates:
    - Session state initialization
    - Sidebar login and settings
    - Automatic first quest batch
    - Tab navigation (Quests, Stats, Vault)
    - Submission, save toggle and badge announcement handling
    """
    try:
        store = get_store()
        gemini_api_key = get_secret("gemini_api_key")
        if gemini_api_key:
            oracle.configure(gemini_api_key)
        datadog_api_key = get_secret("datadog_api_key")
    except Exception as e:
        st.error("Configuration error. Please contact the administrator.")
        logger.error(f"Failed to load configuration: {e}")
        return

    initialize_session_state(store)

    if not st.session_state.app_state.user.is_logged_in:
        st.title("🎯 PP Quest")
        st.caption("Master Your Day")
        render_sidebar_auth()
        handle_authentication(store)
        st.info("👈 Log in using the sidebar to start your adventure!")
        return

    render_settings(store)

    state = st.session_state.app_state
    if not state.active_quests and not state.completed_quests:
        handle_refresh(store, is_auto=True)

    handle_toggle_saved(store, datadog_api_key)

    render_header(st.session_state.app_state.user.username, st.session_state.app_state.stats)

    if "flash" in st.session_state:
        kind, message = st.session_state.pop("flash")
        if kind == "success":
            st.success(message)
            st.balloons()
        else:
            st.error(message)

    tabs = st.tabs(["🎯 Quests", "📉 Stats", "🏛️ Vault"])

    with tabs[0]:
        render_quests_tab(store, datadog_api_key)

    with tabs[1]:
        render_stats(st.session_state.app_state.stats)

    with tabs[2]:
        render_vault(st.session_state.app_state.completed_quests)

    announce_badges()


if __name__ == "__main__":
    main()
