"""Badge rules for PP Quest.

Each rule is an independent predicate over the statistics produced by a
completion. Rules only ever unlock; nothing here revokes a badge.
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from ppquest.models import QuestType, UserStats

VAULT_BADGE = "badge_vault"
VAULT_THRESHOLD = 10
FAST_COMPLETION_SECONDS = 30


@dataclass(frozen=True)
class BadgeContext:
    """Inputs a badge rule may look at.

    Args:
        stats: Statistics after the triggering completion was applied
        duration_seconds: Solve time of the triggering completion
        hour: Local hour of day (0-23) at completion time
    """

    stats: UserStats
    duration_seconds: float
    hour: int


def _type_count(ctx: BadgeContext, quest_type: QuestType) -> int:
    return ctx.stats.type_counts.get(quest_type.value, 0)


BadgeRule = Tuple[str, Callable[[BadgeContext], bool]]

BADGE_RULES: List[BadgeRule] = [
    ("badge_first_quest", lambda c: c.stats.completed >= 1),
    ("badge_quest_10", lambda c: c.stats.completed >= 10),
    ("badge_quest_50", lambda c: c.stats.completed >= 50),
    ("badge_quest_100", lambda c: c.stats.completed >= 100),
    ("badge_streak_3", lambda c: c.stats.streak >= 3),
    ("badge_streak_7", lambda c: c.stats.streak >= 7),
    ("badge_streak_15", lambda c: c.stats.streak >= 15),
    ("badge_extreme", lambda c: c.stats.impossible_count >= 1),
    ("badge_meme", lambda c: c.stats.meme_count >= 5),
    ("badge_web_1", lambda c: _type_count(c, QuestType.ONLINE_IMAGE) >= 1),
    ("badge_web_10", lambda c: _type_count(c, QuestType.ONLINE_IMAGE) >= 10),
    ("badge_photo_1", lambda c: _type_count(c, QuestType.IMAGE) >= 1),
    ("badge_photo_20", lambda c: _type_count(c, QuestType.IMAGE) >= 20),
    ("badge_loc_1", lambda c: _type_count(c, QuestType.LOCATION) >= 1),
    ("badge_loc_10", lambda c: _type_count(c, QuestType.LOCATION) >= 10),
    ("badge_text_1", lambda c: _type_count(c, QuestType.TEXT) >= 1),
    ("badge_text_20", lambda c: _type_count(c, QuestType.TEXT) >= 20),
    ("badge_quiz_pro", lambda c: _type_count(c, QuestType.QUIZ) >= 10),
    ("badge_fast", lambda c: c.duration_seconds < FAST_COMPLETION_SECONDS),
    ("badge_owl", lambda c: 0 <= c.hour < 5),
    ("badge_bird", lambda c: 5 <= c.hour < 9),
    ("badge_lvl_5", lambda c: c.stats.level >= 5),
    ("badge_lvl_10", lambda c: c.stats.level >= 10),
    ("badge_lvl_20", lambda c: c.stats.level >= 20),
]

# Display order used by the badge gallery
ALL_BADGE_IDS = [
    "badge_first_quest", "badge_quest_10", "badge_quest_50", "badge_quest_100",
    "badge_streak_3", "badge_streak_7", "badge_streak_15", "badge_extreme",
    "badge_meme", "badge_web_1", "badge_web_10", "badge_photo_1", "badge_photo_20",
    "badge_loc_1", "badge_loc_10", "badge_text_1", "badge_text_20", "badge_quiz_pro",
    "badge_fast", "badge_owl", "badge_bird", VAULT_BADGE,
    "badge_lvl_5", "badge_lvl_10", "badge_lvl_20",
]


def evaluate_badges(ctx: BadgeContext) -> List[str]:
    """Return the ids of badges whose rule holds but which are not yet owned.

    All rules are checked in the same pass, so one completion can unlock
    several badges. Order follows ``BADGE_RULES``.
    """
    owned = set(ctx.stats.badges)
    return [badge_id for badge_id, rule in BADGE_RULES if badge_id not in owned and rule(ctx)]


def count_saved(completions) -> int:
    return sum(1 for c in completions if c.saved)
