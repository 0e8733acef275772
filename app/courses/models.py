from pydantic import BaseModel, ConfigDict, model_validator
from typing import List, Union
from enum import Enum

from app.courses.config import ASSESSMENT_KEYWORDS

# ==================== ENUMS ====================

class ChapterKind(str, Enum):
    REGULAR = "regular"
    ASSESSMENT = "assessment"

# ==================== CLASSIFICATION ====================

def is_assessment_title(title: str) -> bool:
    """True when the title contains any assessment keyword (case-insensitive)"""
    lowered = (title or "").lower()
    return any(keyword in lowered for keyword in ASSESSMENT_KEYWORDS)

def classify_chapter(title: str) -> ChapterKind:
    if is_assessment_title(title):
        return ChapterKind.ASSESSMENT
    return ChapterKind.REGULAR

# ==================== CHAPTER MODELS ====================

class Chapter(BaseModel):
    """
    Course chapter as seen by the gate.

    `kind` is fixed when the chapter is created. If the caller leaves it out
    it is derived once from the title keywords; the gate only ever reads
    `kind` afterwards.
    """
    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    title: str
    order: int = 0
    kind: ChapterKind

    @model_validator(mode="before")
    @classmethod
    def derive_kind(cls, data):
        if isinstance(data, dict) and data.get("kind") is None:
            data = {**data, "kind": classify_chapter(data.get("title", ""))}
        return data

    @property
    def is_assessment(self) -> bool:
        return self.kind == ChapterKind.ASSESSMENT

class ChapterGateSummary(BaseModel):
    regular_count: int
    assessment_count: int
    completed_regular_count: int
    assessments_unlocked: bool
    visible: List[Chapter] = []
