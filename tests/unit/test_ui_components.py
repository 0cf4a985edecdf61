"""Unit tests for UI components."""

from unittest.mock import patch

from ppquest.models import Quest, QuestDifficulty, QuestType
from ppquest.ui_components import badge_title, render_quest_card


def make_quest(quest_type=QuestType.TEXT):
    return Quest(
        id="q1",
        title="Haiku",
        description="Write a haiku",
        difficulty=QuestDifficulty.EASY,
        type=quest_type,
        points=20,
        instructions="Three lines",
    )


class TestRenderQuestCard:
    """Test the proof form of an active quest."""

    @patch('ppquest.ui_components.st')
    def test_submit_button_always_enabled(self, mock_st):
        mock_st.session_state = {}
        mock_st.form_submit_button.return_value = False

        render_quest_card(make_quest())

        mock_st.form_submit_button.assert_called_once_with("Submit")
        assert mock_st.session_state == {}

    @patch('ppquest.ui_components.st')
    def test_location_button_label(self, mock_st):
        mock_st.session_state = {}
        mock_st.form_submit_button.return_value = False

        render_quest_card(make_quest(QuestType.LOCATION))

        mock_st.form_submit_button.assert_called_once_with("Verify my location")

    @patch('ppquest.ui_components.st')
    def test_submit_stores_submission(self, mock_st):
        mock_st.session_state = {}
        mock_st.form_submit_button.return_value = True
        mock_st.text_area.return_value = "old pond"

        render_quest_card(make_quest())

        assert mock_st.session_state["submission_q1"] == {
            "text": "old pond",
            "image": None,
            "mime_type": "image/jpeg",
            "location_consent": False,
            "choice": None,
        }


class TestBadgeTitle:
    """Test badge display names."""

    def test_known_badge(self):
        assert badge_title("badge_owl") == "🦉 Night Owl"

    def test_unknown_badge_falls_back_to_id(self):
        assert badge_title("badge_mystery") == "🏅 badge_mystery"
