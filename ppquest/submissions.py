"""Submission handling for PP Quest.

Turns raw user input (text, an uploaded image, a location request or a quiz
choice) into a proof, has it judged and reports the outcome. A failed result
is what the app records as a lost quest.
"""

import base64
import logging
from dataclasses import dataclass

from ppquest.location import LocationError, describe_location_error, locate_device
from ppquest.models import Quest, QuestType
from ppquest.oracle import check_quiz_answer, verify_quest_with_ai

logger = logging.getLogger(__name__)

NO_SUBMISSION = "No submission found."


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    feedback: str
    proof: str = ""


def encode_image(data: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode image bytes as a data URL, the stored form of an image proof."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def judge_submission(
    quest: Quest,
    language: str,
    text: str | None = None,
    image: bytes | None = None,
    mime_type: str = "image/jpeg",
    location_consent: bool = False,
    choice: str | None = None,
) -> SubmissionResult:
    """Build the proof for ``quest`` from user input and judge it.

    Args:
        quest: The quest being attempted
        language: Language code for the AI feedback
        text: Answer for TEXT and LOGIC quests
        image: Photo or downloaded image for IMAGE and ONLINE_IMAGE quests
        mime_type: MIME type of ``image``
        location_consent: Whether the user allowed a location lookup
        choice: Selected option for QUIZ quests

    Returns:
        SubmissionResult with the verdict, feedback and the proof that was
        judged (empty when no proof could be built)
    """
    if quest.type == QuestType.QUIZ:
        if not choice:
            return SubmissionResult(False, NO_SUBMISSION)
        verdict = check_quiz_answer(quest, choice)
        return SubmissionResult(verdict.success, verdict.feedback, choice)

    if quest.type == QuestType.LOCATION:
        try:
            proof = locate_device(location_consent)
        except LocationError as e:
            logger.info(f"Location proof for quest {quest.id} failed with code {e.code}")
            return SubmissionResult(False, describe_location_error(e))
        submission_type = QuestType.LOCATION

    elif quest.type in (QuestType.IMAGE, QuestType.ONLINE_IMAGE):
        if not image:
            return SubmissionResult(False, NO_SUBMISSION)
        proof = encode_image(image, mime_type)
        submission_type = quest.type

    else:
        # LOGIC quests are answered in free text
        proof = (text or "").strip()
        if not proof:
            return SubmissionResult(False, NO_SUBMISSION)
        submission_type = QuestType.TEXT

    verdict = verify_quest_with_ai(quest, proof, submission_type, language)
    return SubmissionResult(verdict.success, verdict.feedback, proof)
