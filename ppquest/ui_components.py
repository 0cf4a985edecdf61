"""UI components module for PP Quest.

This module provides Streamlit UI rendering functions for all application views:
- Header with rank, level and XP progress
- Quest cards with a proof form per quest type
- Completed quest history with the save toggle
- Stats tab with counters and the badge gallery
- Vault of saved completions
- Sidebar login form

Render functions never change the application state. Form submissions are
stored in ``st.session_state`` for the main app to process.
"""

import streamlit as st

from ppquest.badges import ALL_BADGE_IDS
from ppquest.ledger import XP_PER_LEVEL, get_tier, level_progress
from ppquest.models import Quest, QuestCompletion, QuestType, UserStats
from ppquest.oracle import decode_image_proof

DIFFICULTY_ICONS = {
    "EASY": "🟢",
    "MEDIUM": "🟡",
    "HARD": "🔴",
    "MEME": "🟣",
    "IMPOSSIBLE": "⚫",
}

TYPE_ICONS = {
    "IMAGE": "📸",
    "ONLINE_IMAGE": "🌐",
    "TEXT": "✍️",
    "LOCATION": "📍",
    "LOGIC": "🧩",
    "QUIZ": "❓",
}

BADGE_ICONS = {
    "badge_first_quest": "🩸", "badge_quest_10": "⚔️", "badge_quest_50": "🛡️", "badge_quest_100": "🏛️",
    "badge_streak_3": "🔥", "badge_streak_7": "🌪️", "badge_streak_15": "🧨", "badge_extreme": "🏔️",
    "badge_meme": "🤡", "badge_web_1": "🔎", "badge_web_10": "📡", "badge_photo_1": "📸",
    "badge_photo_20": "🎞️", "badge_loc_1": "🚶", "badge_loc_10": "🛸", "badge_text_1": "✒️",
    "badge_text_20": "📚", "badge_quiz_pro": "🎓", "badge_fast": "🏎️", "badge_owl": "🦉",
    "badge_bird": "🌅", "badge_vault": "🏺", "badge_lvl_5": "🏅", "badge_lvl_10": "🎖️",
    "badge_lvl_20": "👑",
}

BADGE_LABELS = {
    "badge_first_quest": ("First Blood", "Complete your first quest"),
    "badge_quest_10": ("Veteran", "Complete 10 quests"),
    "badge_quest_50": ("Champion", "Complete 50 quests"),
    "badge_quest_100": ("Living Legend", "Complete 100 quests"),
    "badge_streak_3": ("On Fire", "Reach a streak of 3"),
    "badge_streak_7": ("Unstoppable", "Reach a streak of 7"),
    "badge_streak_15": ("Menace", "Reach a streak of 15"),
    "badge_extreme": ("Impossible", "Beat an IMPOSSIBLE quest"),
    "badge_meme": ("Meme Lord", "Complete 5 MEME quests"),
    "badge_web_1": ("Web Surfer", "Complete an online image quest"),
    "badge_web_10": ("Net Runner", "Complete 10 online image quests"),
    "badge_photo_1": ("Snapshot", "Complete a photo quest"),
    "badge_photo_20": ("Paparazzi", "Complete 20 photo quests"),
    "badge_loc_1": ("Wanderer", "Complete a location quest"),
    "badge_loc_10": ("Globetrotter", "Complete 10 location quests"),
    "badge_text_1": ("Scribe", "Complete a text quest"),
    "badge_text_20": ("Novelist", "Complete 20 text quests"),
    "badge_quiz_pro": ("Quiz Pro", "Complete 10 quizzes"),
    "badge_fast": ("Speedrunner", "Finish a quest in under 30 seconds"),
    "badge_owl": ("Night Owl", "Finish a quest between midnight and 5 AM"),
    "badge_bird": ("Early Bird", "Finish a quest between 5 and 9 AM"),
    "badge_vault": ("Curator", "Save 10 quests to the vault"),
    "badge_lvl_5": ("Level 5", "Reach level 5"),
    "badge_lvl_10": ("Level 10", "Reach level 10"),
    "badge_lvl_20": ("Level 20", "Reach level 20"),
}

IMAGE_TYPES = ["png", "jpg", "jpeg", "webp", "gif"]


def badge_title(badge_id: str) -> str:
    icon = BADGE_ICONS.get(badge_id, "🏅")
    name = BADGE_LABELS.get(badge_id, (badge_id, ""))[0]
    return f"{icon} {name}"


def render_header(username: str | None, stats: UserStats) -> None:
    """Render the rank, level and XP progress bar."""
    col1, col2 = st.columns([2, 1])
    with col1:
        st.title("🎯 PP Quest")
        st.caption(f"Adventurer: **{username or 'Unknown'}**")
    with col2:
        st.markdown(f"### {get_tier(stats.level)}")
        st.metric("Level", stats.level)
    st.progress(level_progress(stats.xp), text=f"{stats.xp} / {XP_PER_LEVEL} XP")


def render_quest_card(quest: Quest) -> None:
    """Render an active quest with the proof form matching its type.

    The form stores ``{"text", "image", "mime_type", "location_consent",
    "choice"}`` under ``submission_<quest id>`` in session state.
    """
    icon = TYPE_ICONS.get(quest.type.value, "⚡")
    with st.container(border=True):
        st.subheader(f"{icon} {quest.title}")
        st.caption(
            f"{DIFFICULTY_ICONS.get(quest.difficulty.value, '')} {quest.difficulty.value} · "
            f"{quest.type.value} · +{quest.points} XP"
        )
        st.write(quest.description)
        st.info(quest.instructions)

        with st.form(key=f"quest_{quest.id}_form"):
            text = None
            upload = None
            consent = False
            choice = None

            if quest.type == QuestType.QUIZ:
                choice = st.radio("Pick your answer:", quest.quiz_options or [], index=None, key=f"quest_{quest.id}_choice")
            elif quest.type == QuestType.IMAGE:
                upload = st.camera_input("Take a photo", key=f"quest_{quest.id}_camera")
            elif quest.type == QuestType.ONLINE_IMAGE:
                upload = st.file_uploader("Upload your search result", type=IMAGE_TYPES, key=f"quest_{quest.id}_upload")
            elif quest.type == QuestType.LOCATION:
                consent = st.checkbox("Share my location", key=f"quest_{quest.id}_consent")
            else:
                text = st.text_area("Tell the Master...", height=120, max_chars=1000, key=f"quest_{quest.id}_text")

            label = "Verify my location" if quest.type == QuestType.LOCATION else "Submit"
            if st.form_submit_button(label):
                st.session_state[f"submission_{quest.id}"] = {
                    "text": text,
                    "image": upload.getvalue() if upload is not None else None,
                    "mime_type": upload.type if upload is not None else "image/jpeg",
                    "location_consent": consent,
                    "choice": choice,
                }

        st.button("📤 Share", key=f"quest_{quest.id}_share", on_click=_share_quest, args=(quest,))


def _share_quest(quest: Quest) -> None:
    st.session_state["share_text"] = f'Quest: {quest.title}\n"{quest.description}"\nJoin PP Quest!'


def render_completed_card(completion: QuestCompletion) -> None:
    """Render a finished quest with its save toggle.

    A click stores the quest id under ``toggle_saved`` in session state.
    """
    quest = completion.quest_data
    with st.container(border=True):
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(f"✅ **{quest.title}** · +{quest.points} XP")
            st.caption(f'"{completion.ai_response}"')
        with col2:
            heart = "❤️" if completion.saved else "🤍"
            if st.button(heart, key=f"save_{completion.quest_id}"):
                st.session_state["toggle_saved"] = completion.quest_id


def render_stats(stats: UserStats) -> None:
    """Render counters, the difficulty breakdown and the badge gallery."""
    st.header("📉 Stats")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("👑 Completed", stats.completed)
    col2.metric("💥 Failed", stats.lost)
    col3.metric("⚡ Streak", stats.streak, help=f"Best: {stats.best_streak}")
    col4.metric("💎 Total XP", stats.total_points)

    st.divider()
    st.subheader("Mastery Breakdown")
    cols = st.columns(5)
    breakdown = [
        ("Easy", stats.easy_count),
        ("Medium", stats.medium_count),
        ("Hard", stats.hard_count),
        ("Meme", stats.meme_count),
        ("Extreme", stats.impossible_count),
    ]
    for col, (label, value) in zip(cols, breakdown):
        col.metric(label, value)

    st.divider()
    st.subheader("🏅 Badges")
    owned = set(stats.badges)
    grid = st.columns(3)
    for i, badge_id in enumerate(ALL_BADGE_IDS):
        name, description = BADGE_LABELS.get(badge_id, (badge_id, ""))
        with grid[i % 3]:
            if badge_id in owned:
                st.markdown(f"{BADGE_ICONS.get(badge_id, '🏅')} **{name}**")
            else:
                st.markdown("🔒 *Locked*")
            st.caption(description)


def render_vault(completions: list[QuestCompletion]) -> None:
    """Render saved completions with their proof and verdict."""
    st.header("🏛️ Vault")

    saved = [c for c in completions if c.saved]
    if not saved:
        st.info("Your vault is empty. Save a completed quest to keep it here.")
        return

    for completion in saved:
        quest = completion.quest_data
        with st.expander(f"🏆 {quest.title}"):
            if quest.type in (QuestType.IMAGE, QuestType.ONLINE_IMAGE):
                image_bytes, _ = decode_image_proof(completion.proof)
                st.image(image_bytes, caption="Visual Proof")
            else:
                st.write(f"**Proof:** {completion.proof}")
            st.write(f'**Master\'s verdict:** "{completion.ai_response}"')
            st.caption(f"{completion.timestamp:%Y-%m-%d} · +{quest.points} XP")
            if st.button("Remove from vault", key=f"unsave_{completion.quest_id}"):
                st.session_state["toggle_saved"] = completion.quest_id


def render_sidebar_auth() -> None:
    """Render the login form in the sidebar.

    Stores input under ``auth_submission`` in session state for processing
    by the main app.
    """
    st.sidebar.header("🎮 Login")

    st.sidebar.markdown("""
    Enter your name and PIN. The first login creates your profile.
    """)

    with st.sidebar.form(key="auth_form"):
        username = st.text_input(
            "Username:",
            max_chars=50,
            key="auth_username_input"
        )

        pin = st.text_input(
            "PIN:",
            type="password",
            max_chars=20,
            key="auth_pin_input"
        )

        if st.form_submit_button("Start Adventure"):
            st.session_state["auth_submission"] = {
                "username": username,
                "pin": pin
            }
