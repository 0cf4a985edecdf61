"""Gemini-backed quest source and verification oracle for PP Quest.

Generates daily quest batches and judges submitted proofs. Every call fails
open: errors are logged and turned into an empty batch or a failed verdict.
"""

import base64
import binascii
import json
import logging
import os
import uuid
from datetime import datetime, UTC
from typing import List, Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from ppquest.models import Quest, QuestType

logger = logging.getLogger(__name__)

GEMINI_MODEL = "gemini-3-flash-preview"
QUESTS_PER_BATCH = 4

LANGUAGE_NAMES = {"en": "English", "sr": "Serbian"}

GENERIC_FAILURE = "AI judging failed. Try again!"
EMPTY_RESPONSE = "System Error"
QUIZ_PASSED = "Correct! The Quest Master approves."
QUIZ_FAILED = "Wrong answer. Quest failed!"

_client = None


class Verdict(BaseModel):
    success: bool
    feedback: str


class QuestDraft(BaseModel):
    """Response schema for quest generation; validated into ``Quest`` afterwards."""
    title: str
    description: str
    difficulty: str
    type: str
    points: int
    instructions: str
    quizOptions: Optional[List[str]] = None
    correctAnswer: Optional[str] = None


def configure(api_key: str) -> None:
    """Install a Gemini client for the given API key."""
    global _client
    _client = genai.Client(api_key=api_key)


def get_client():
    global _client
    if _client is None:
        _client = genai.Client(api_key=os.environ.get("GEMINI_API_KEY"))
    return _client


def _language_name(language: str) -> str:
    return LANGUAGE_NAMES.get(language, LANGUAGE_NAMES["en"])


def _quest_prompt(language: str) -> str:
    return f"""Generate {QUESTS_PER_BATCH} creative 'Side Quests' for a mobile app.
LANGUAGE: {_language_name(language)}.

TYPES TO MIX: QUIZ, IMAGE, TEXT, LOCATION, ONLINE_IMAGE.
DIFFICULTIES: EASY, MEDIUM, HARD, MEME, IMPOSSIBLE.
RULES:
- Do not make all quests the same type. At most 2 of any type.
- ONLINE_IMAGE: instructions ask the user to find a specific image on the internet.
- QUIZ: provide exactly 3 funny, relevant options in quizOptions and the right one in correctAnswer.
- LOCATION: instructions name a kind of real-world public place (a library, a fountain).
- STYLE: edgy, modern, funny. No boring trivia.

Return JSON only."""


def _verification_prompt(quest: Quest, proof: str, submission_type: QuestType, language: str) -> str:
    lang = _language_name(language)
    type_rules = {
        QuestType.TEXT: "This is strictly a TEXT submission. Judge creativity and relevance.",
        QuestType.IMAGE: "This is strictly an IMAGE submission. Analyze the visual data.",
        QuestType.ONLINE_IMAGE: "This is strictly an ONLINE IMAGE search task. The user found this image online.",
        QuestType.LOCATION: (
            f"This is strictly a LOCATION submission via coordinates. Check if the coordinates "
            f"[{proof}] correspond to: '{quest.instructions}'."
        ),
    }
    return f"""You are a strict, sassy AI Quest Master.
QUEST TITLE: "{quest.title}"
QUEST DESC: "{quest.description}"
EXPECTED TYPE: {submission_type.value}

VERIFICATION CONTEXT:
{type_rules.get(submission_type, type_rules[QuestType.TEXT])}

You MUST write your feedback in {lang}.
IF FAIL: success=false, feedback=a short roast of the poor attempt.
IF PASS: success=true, feedback=brief funny praise.

Return JSON: {{"success": boolean, "feedback": "string"}}"""


def decode_image_proof(proof: str) -> tuple[bytes, str]:
    """
    Split an image proof into raw bytes and MIME type.

    Accepts a ``data:<mime>;base64,<payload>`` URL or a bare base64 payload
    (assumed JPEG).

    Raises:
        ValueError: If the payload is not valid base64
    """
    mime_type = "image/jpeg"
    payload = proof
    if "base64," in proof:
        header, payload = proof.split("base64,", 1)
        if header.startswith("data:") and header.endswith(";"):
            mime_type = header[len("data:"):-1] or mime_type
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as e:
        raise ValueError(f"Image proof is not valid base64: {e}") from e


def generate_daily_quests(language: str) -> List[Quest]:
    """
    Ask Gemini for a fresh batch of quests.

    Returns an empty list on any failure. Every quest gets a fresh random
    id; entries that do not validate are skipped.
    """
    try:
        response = get_client().models.generate_content(
            model=GEMINI_MODEL,
            contents=_quest_prompt(language),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=list[QuestDraft],
            ))

        raw_quests = json.loads(response.text or "[]")
        if not isinstance(raw_quests, list):
            logger.error(f"Quest generation returned a non-list payload: {response.text}")
            return []

        now = datetime.now(UTC)
        quests = []
        for raw in raw_quests:
            if not isinstance(raw, dict):
                continue
            raw = {**raw, "id": uuid.uuid4().hex, "createdAt": now}
            try:
                quests.append(Quest.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed quest from AI: {e}")

        logger.info(f"Generated {len(quests)} quests in '{language}'")
        return quests

    except Exception as e:
        logger.error(f"Quest generation failed: {e}")
        return []


def verify_quest_with_ai(quest: Quest, proof: str, submission_type: QuestType, language: str) -> Verdict:
    """
    Judge a proof against a quest with Gemini.

    Image submissions are sent as inline image bytes; text and coordinates
    are sent as text. Any failure yields a failed verdict with generic
    feedback instead of an exception.
    """
    try:
        contents = [_verification_prompt(quest, proof, submission_type, language)]

        if submission_type in (QuestType.IMAGE, QuestType.ONLINE_IMAGE):
            image_bytes, mime_type = decode_image_proof(proof)
            contents.append(types.Part.from_bytes(data=image_bytes, mime_type=mime_type))
        else:
            contents.append(f'User Proof Data: "{proof}"')

        response = get_client().models.generate_content(
            model=GEMINI_MODEL,
            contents=contents,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=Verdict,
            ))

        if not response.text:
            logger.error("Empty verification response from Gemini")
            return Verdict(success=False, feedback=EMPTY_RESPONSE)

        verdict = Verdict.model_validate_json(response.text)
        logger.info(f"AI verdict for quest {quest.id}: success={verdict.success}")
        return verdict

    except Exception as e:
        logger.error(f"Verification failed: {e}")
        return Verdict(success=False, feedback=GENERIC_FAILURE)


def check_quiz_answer(quest: Quest, choice: str) -> Verdict:
    """Judge a quiz locally. A quest without a correct answer accepts any choice."""
    if not quest.correct_answer or choice == quest.correct_answer:
        return Verdict(success=True, feedback=QUIZ_PASSED)
    return Verdict(success=False, feedback=QUIZ_FAILED)
