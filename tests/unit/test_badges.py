"""Unit tests for badge rules."""

from ppquest.badges import ALL_BADGE_IDS, BADGE_RULES, VAULT_BADGE, BadgeContext, evaluate_badges
from ppquest.models import UserStats


class TestEvaluateBadges:
    """Test the badge rule table."""

    def test_fresh_stats_unlock_nothing(self):
        """No completions and a slow midday solve earn no badge."""
        ctx = BadgeContext(stats=UserStats(), duration_seconds=60, hour=12)
        assert evaluate_badges(ctx) == []

    def test_owned_badges_not_returned(self):
        stats = UserStats(completed=1, badges=["badge_first_quest"])
        ctx = BadgeContext(stats=stats, duration_seconds=60, hour=12)
        assert evaluate_badges(ctx) == []

    def test_thresholds_are_inclusive(self):
        stats = UserStats(
            completed=10,
            streak=3,
            type_counts={"QUIZ": 10, "TEXT": 20, "IMAGE": 20, "LOCATION": 10, "ONLINE_IMAGE": 10},
            level=20,
        )
        unlocked = evaluate_badges(BadgeContext(stats=stats, duration_seconds=60, hour=12))

        for badge_id in [
            "badge_quest_10", "badge_streak_3", "badge_quiz_pro", "badge_text_20",
            "badge_photo_20", "badge_loc_10", "badge_web_10", "badge_lvl_20",
        ]:
            assert badge_id in unlocked
        assert "badge_quest_50" not in unlocked
        assert "badge_streak_7" not in unlocked

    def test_missing_type_counter_counts_as_zero(self):
        stats = UserStats(completed=1, type_counts={})
        unlocked = evaluate_badges(BadgeContext(stats=stats, duration_seconds=60, hour=12))
        assert unlocked == ["badge_first_quest"]


class TestBadgeCatalog:
    """Test the badge id lists."""

    def test_gallery_lists_every_rule_and_vault(self):
        rule_ids = {badge_id for badge_id, _ in BADGE_RULES}
        assert set(ALL_BADGE_IDS) == rule_ids | {VAULT_BADGE}
        assert len(ALL_BADGE_IDS) == 25

    def test_vault_not_in_rule_table(self):
        """The vault badge is only checked when toggling saved entries."""
        assert VAULT_BADGE not in {badge_id for badge_id, _ in BADGE_RULES}
