"""Unit tests for submission judging."""

from unittest.mock import patch

import pytest

from ppquest.location import PERMISSION_DENIED, TIMEOUT, LocationError
from ppquest.models import Quest, QuestDifficulty, QuestType
from ppquest.oracle import QUIZ_FAILED, QUIZ_PASSED, Verdict
from ppquest.submissions import NO_SUBMISSION, encode_image, judge_submission


def make_quest(quest_type, **overrides):
    fields = dict(
        id="q1",
        title="Quest",
        description="Do the thing",
        difficulty=QuestDifficulty.MEDIUM,
        type=quest_type,
        points=40,
        instructions="Carefully",
    )
    fields.update(overrides)
    return Quest(**fields)


class TestQuizSubmissions:
    """Quizzes are judged without the AI."""

    @patch('ppquest.submissions.verify_quest_with_ai')
    def test_correct_choice(self, mock_verify):
        quest = make_quest(QuestType.QUIZ, quiz_options=["x", "y", "z"], correct_answer="y")

        result = judge_submission(quest, "en", choice="y")

        assert result.success is True
        assert result.feedback == QUIZ_PASSED
        assert result.proof == "y"
        mock_verify.assert_not_called()

    def test_wrong_choice(self):
        quest = make_quest(QuestType.QUIZ, quiz_options=["x", "y", "z"], correct_answer="y")

        result = judge_submission(quest, "en", choice="x")

        assert result.success is False
        assert result.feedback == QUIZ_FAILED

    def test_no_choice(self):
        quest = make_quest(QuestType.QUIZ, quiz_options=["x", "y", "z"], correct_answer="y")

        result = judge_submission(quest, "en")

        assert result.success is False
        assert result.feedback == NO_SUBMISSION


class TestTextSubmissions:
    """Text and logic answers go to the AI as text."""

    @patch('ppquest.submissions.verify_quest_with_ai')
    def test_text_is_stripped_and_judged(self, mock_verify):
        mock_verify.return_value = Verdict(success=True, feedback="Deep")
        quest = make_quest(QuestType.TEXT)

        result = judge_submission(quest, "sr", text="  to be  ")

        assert result.success is True
        assert result.proof == "to be"
        mock_verify.assert_called_once_with(quest, "to be", QuestType.TEXT, "sr")

    @patch('ppquest.submissions.verify_quest_with_ai')
    def test_logic_judged_as_text(self, mock_verify):
        mock_verify.return_value = Verdict(success=False, feedback="Wrong")
        quest = make_quest(QuestType.LOGIC)

        judge_submission(quest, "en", text="42")

        assert mock_verify.call_args.args[2] == QuestType.TEXT

    @pytest.mark.parametrize("text", [None, "", "   "])
    @patch('ppquest.submissions.verify_quest_with_ai')
    def test_blank_text_is_not_submitted(self, mock_verify, text):
        result = judge_submission(make_quest(QuestType.TEXT), "en", text=text)

        assert result.success is False
        assert result.feedback == NO_SUBMISSION
        mock_verify.assert_not_called()


class TestImageSubmissions:
    """Images are encoded as data URLs before judging."""

    @patch('ppquest.submissions.verify_quest_with_ai')
    def test_image_encoded(self, mock_verify):
        mock_verify.return_value = Verdict(success=True, feedback="Great shot")
        quest = make_quest(QuestType.ONLINE_IMAGE)

        result = judge_submission(quest, "en", image=b"\xff\xd8\xff", mime_type="image/png")

        assert result.proof == "data:image/png;base64,/9j/"
        mock_verify.assert_called_once_with(quest, result.proof, QuestType.ONLINE_IMAGE, "en")

    @patch('ppquest.submissions.verify_quest_with_ai')
    def test_missing_image(self, mock_verify):
        result = judge_submission(make_quest(QuestType.IMAGE), "en")

        assert result.feedback == NO_SUBMISSION
        mock_verify.assert_not_called()

    def test_encode_image_default_mime(self):
        assert encode_image(b"\xff\xd8\xff") == "data:image/jpeg;base64,/9j/"


class TestLocationSubmissions:
    """Location proofs come from the device lookup."""

    @patch('ppquest.submissions.verify_quest_with_ai')
    @patch('ppquest.submissions.locate_device')
    def test_coordinates_are_judged(self, mock_locate, mock_verify):
        mock_locate.return_value = "44.8, 20.4"
        mock_verify.return_value = Verdict(success=True, feedback="You are there")
        quest = make_quest(QuestType.LOCATION)

        result = judge_submission(quest, "en", location_consent=True)

        assert result.success is True
        assert result.proof == "44.8, 20.4"
        mock_locate.assert_called_once_with(True)
        mock_verify.assert_called_once_with(quest, "44.8, 20.4", QuestType.LOCATION, "en")

    @pytest.mark.parametrize("code,fragment", [(PERMISSION_DENIED, "denied"), (TIMEOUT, "timeout")])
    @patch('ppquest.submissions.verify_quest_with_ai')
    @patch('ppquest.submissions.locate_device')
    def test_lookup_failure_fails_quest(self, mock_locate, mock_verify, code, fragment):
        mock_locate.side_effect = LocationError(code)

        result = judge_submission(make_quest(QuestType.LOCATION), "en")

        assert result.success is False
        assert fragment in result.feedback.lower()
        assert result.proof == ""
        mock_verify.assert_not_called()
