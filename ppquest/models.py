"""Data model for PP Quest.

Pydantic models for quests, completions, user statistics and the root
application state. Attributes are snake_case in Python; the persisted JSON
snapshot uses the camelCase aliases.
"""

from datetime import datetime, UTC
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class QuestDifficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    MEME = "MEME"
    IMPOSSIBLE = "IMPOSSIBLE"


class QuestType(str, Enum):
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    LOCATION = "LOCATION"
    QUIZ = "QUIZ"
    LOGIC = "LOGIC"
    ONLINE_IMAGE = "ONLINE_IMAGE"


Language = Literal["en", "sr"]
Theme = Literal["dark", "light"]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestLocation(_Model):
    lat: float
    lng: float
    radius: float
    name: str


class Quest(_Model):
    """A single challenge descriptor, immutable once generated."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str
    difficulty: QuestDifficulty
    type: QuestType
    points: int = Field(ge=0)
    instructions: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    quiz_options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    location: Optional[QuestLocation] = None


class QuestCompletion(_Model):
    """Record of one successfully resolved quest.

    ``quest_data`` is a copy of the quest taken at completion time. Only
    ``saved`` changes afterwards.
    """

    quest_id: str
    quest_data: Quest
    timestamp: datetime
    duration_seconds: float
    proof: str
    ai_response: str
    saved: bool = False


def _initial_type_counts() -> Dict[str, int]:
    return {
        QuestType.IMAGE.value: 0,
        QuestType.TEXT.value: 0,
        QuestType.LOCATION.value: 0,
        QuestType.QUIZ.value: 0,
        QuestType.ONLINE_IMAGE.value: 0,
    }


class UserStats(_Model):
    completed: int = 0
    lost: int = 0
    streak: int = 0
    best_streak: int = 0
    total_points: int = 0
    xp: int = 0
    level: int = 1
    easy_count: int = 0
    medium_count: int = 0
    hard_count: int = 0
    meme_count: int = 0
    impossible_count: int = 0
    badges: List[str] = Field(default_factory=list)
    type_counts: Dict[str, int] = Field(default_factory=_initial_type_counts)


class UserProfile(_Model):
    username: Optional[str] = None
    is_logged_in: bool = False
    is_premium: bool = False
    refreshes_left: int = 2
    language: Language = "en"
    theme: Theme = "dark"
    pin_hash: Optional[str] = None


class AppState(_Model):
    """Root aggregate persisted as a single snapshot."""

    user: UserProfile = Field(default_factory=UserProfile)
    active_quests: List[Quest] = Field(default_factory=list)
    completed_quests: List[QuestCompletion] = Field(default_factory=list)
    stats: UserStats = Field(default_factory=UserStats)
    last_refresh: Optional[datetime] = None
