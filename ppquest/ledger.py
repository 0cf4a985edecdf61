"""Progress ledger for PP Quest.

This module folds completion and failure events into the persistent
statistics: XP and leveling, streaks, per-difficulty and per-type counters,
and badge unlocks. Every transition takes an ``AppState`` and returns a new
one; the input is never mutated and nothing here touches storage.
"""

import logging
import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ppquest.badges import VAULT_BADGE, VAULT_THRESHOLD, BadgeContext, count_saved, evaluate_badges
from ppquest.models import AppState, Quest, QuestCompletion, QuestDifficulty, UserProfile

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 500

_DIFFICULTY_COUNTERS = {
    QuestDifficulty.EASY: "easy_count",
    QuestDifficulty.MEDIUM: "medium_count",
    QuestDifficulty.HARD: "hard_count",
    QuestDifficulty.MEME: "meme_count",
    QuestDifficulty.IMPOSSIBLE: "impossible_count",
}

_SETTINGS = ("language", "theme")


def _local_now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now().astimezone()


def apply_xp(xp: int, level: int, points: int) -> Tuple[int, int]:
    """Add points to the level-progress XP and roll over at most once.

    Args:
        xp: Current level-progress XP
        level: Current level
        points: XP awarded by the completed quest

    Returns:
        Tuple of (new_xp, new_level)

    A single event performs at most one level-up. With ``points`` of 1000 or
    more the remainder stays at or above ``XP_PER_LEVEL`` until the next
    event; that is the current behaviour and is pinned by tests.
    """
    new_xp = xp + points
    if new_xp >= XP_PER_LEVEL:
        return new_xp - XP_PER_LEVEL, level + 1
    return new_xp, level


def get_tier(level: int) -> str:
    """Map a level to its rank title."""
    if level < 2:
        return "Noob"
    if level < 5:
        return "Novice"
    if level < 10:
        return "Explorer"
    if level < 20:
        return "Legend"
    return "Demigod"


def level_progress(xp: int) -> float:
    """Fraction of the current level completed, clamped to [0, 1]."""
    return min(1.0, max(0.0, xp / XP_PER_LEVEL))


def record_success(
    state: AppState,
    quest_id: str,
    proof: str,
    feedback: str,
    duration_seconds: float,
    now: Optional[datetime] = None,
) -> Tuple[AppState, List[str]]:
    """Apply a successful quest completion.

    Moves the quest from the active set to the front of the completion
    history and updates every counter, then evaluates the badge rules
    against the updated statistics.

    Args:
        state: Current application state
        quest_id: Id of a quest in the active set
        proof: Raw proof payload that was judged
        feedback: Feedback text from the verification oracle
        duration_seconds: Time the user took to solve the quest
        now: Completion time; its hour drives the time-of-day badges.
            Defaults to the local wall clock.

    Returns:
        Tuple of (new_state, unlocked_badge_ids). When ``quest_id`` is not
        active the original state is returned with no unlocks.
    """
    quest = next((q for q in state.active_quests if q.id == quest_id), None)
    if quest is None:
        logger.info(f"Ignoring completion for inactive quest {quest_id}")
        return state, []

    now = _local_now(now)
    new_state = state.model_copy(deep=True)
    stats = new_state.stats

    stats.xp, stats.level = apply_xp(stats.xp, stats.level, quest.points)

    counter = _DIFFICULTY_COUNTERS[quest.difficulty]
    setattr(stats, counter, getattr(stats, counter) + 1)
    stats.type_counts[quest.type.value] = stats.type_counts.get(quest.type.value, 0) + 1

    stats.completed += 1
    stats.total_points += quest.points
    stats.streak += 1
    stats.best_streak = max(stats.best_streak, stats.streak)

    unlocked = evaluate_badges(BadgeContext(stats=stats, duration_seconds=duration_seconds, hour=now.hour))
    stats.badges.extend(unlocked)

    completion = QuestCompletion(
        quest_id=quest.id,
        quest_data=quest.model_copy(deep=True),
        timestamp=now,
        duration_seconds=duration_seconds,
        proof=proof,
        ai_response=feedback,
    )
    new_state.active_quests = [q for q in new_state.active_quests if q.id != quest_id]
    new_state.completed_quests.insert(0, completion)

    if unlocked:
        logger.info(f"Quest {quest_id} unlocked badges: {', '.join(unlocked)}")
    return new_state, unlocked


def record_failure(state: AppState) -> AppState:
    """Count a failed attempt and reset the streak.

    The failed quest stays in the active set so it can be retried.
    """
    new_state = state.model_copy(deep=True)
    new_state.stats.lost += 1
    new_state.stats.streak = 0
    return new_state


def toggle_saved(state: AppState, quest_id: str) -> Tuple[AppState, List[str]]:
    """Flip the bookmark flag on a completed quest.

    Unlocks the vault badge once ten or more completions are saved.
    """
    if not any(c.quest_id == quest_id for c in state.completed_quests):
        return state, []

    new_state = state.model_copy(deep=True)
    for completion in new_state.completed_quests:
        if completion.quest_id == quest_id:
            completion.saved = not completion.saved

    unlocked = []
    if count_saved(new_state.completed_quests) >= VAULT_THRESHOLD and VAULT_BADGE not in new_state.stats.badges:
        new_state.stats.badges.append(VAULT_BADGE)
        unlocked.append(VAULT_BADGE)
    return new_state, unlocked


def replace_active_quests(
    state: AppState,
    new_quests: Iterable[Quest],
    consumes_manual_refresh: bool,
    now: Optional[datetime] = None,
) -> AppState:
    """Swap in a fresh batch of quests.

    Pending quests are discarded. Only a manual refresh spends one of the
    remaining refreshes, and the allowance never drops below zero. A quest
    whose id is already in the history or earlier in the batch gets a fresh
    id so completion ids stay unique.
    """
    new_state = state.model_copy(deep=True)
    taken = {c.quest_id for c in new_state.completed_quests}
    active = []
    for quest in new_quests:
        if quest.id in taken:
            fresh_id = uuid.uuid4().hex
            logger.info(f"Re-keying quest {quest.id} to {fresh_id}")
            quest = quest.model_copy(update={"id": fresh_id})
        taken.add(quest.id)
        active.append(quest)
    new_state.active_quests = active
    new_state.last_refresh = _local_now(now)
    if consumes_manual_refresh:
        new_state.user.refreshes_left = max(0, new_state.user.refreshes_left - 1)
    return new_state


def update_setting(state: AppState, key: str, value: str) -> AppState:
    """Change a user preference (``language`` or ``theme``).

    Raises:
        ValueError: If ``key`` is not a known setting or ``value`` is invalid
    """
    if key not in _SETTINGS:
        raise ValueError(f"Unknown setting: {key}")

    user = state.user.model_dump()
    user[key] = value
    new_state = state.model_copy(deep=True)
    new_state.user = UserProfile.model_validate(user)
    return new_state
