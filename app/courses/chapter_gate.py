"""
Chapter Visibility Gate
File: app/courses/chapter_gate.py

Regular chapters are always visible. Assessment chapters (assignments,
tests, exams, finals) are appended only once every regular chapter of the
course is completed. Learners who are not enrolled pass an empty
completion map and therefore see regular chapters only.
"""

from typing import Any, Iterable, List, Mapping, Tuple

from app.courses.config import UNLOCK_WHEN_NO_REGULAR_CHAPTERS
from app.courses.models import (
    Chapter, ChapterGateSummary, ChapterKind,
    classify_chapter, is_assessment_title,
)

__all__ = [
    "ChapterKind", "classify_chapter", "is_assessment_title",
    "partition_chapters", "is_chapter_completed", "all_regular_completed",
    "assessments_unlocked", "visible_chapters", "gate_summary",
]


# ==================== PARTITIONING ====================

def partition_chapters(chapters: Iterable[Chapter]) -> Tuple[List[Chapter], List[Chapter]]:
    """Split chapters into (regular, assessment), keeping relative order"""
    regular: List[Chapter] = []
    assessment: List[Chapter] = []
    for chapter in chapters:
        if chapter.kind == ChapterKind.ASSESSMENT:
            assessment.append(chapter)
        else:
            regular.append(chapter)
    return regular, assessment


# ==================== COMPLETION ====================

def is_chapter_completed(chapter: Chapter, completion_map: Mapping[Any, Any]) -> bool:
    if not completion_map:
        return False
    # only a literal True counts, anything else is "not completed"
    return completion_map.get(chapter.id) is True


def all_regular_completed(
    regular: List[Chapter],
    completion_map: Mapping[Any, Any],
    unlock_when_empty: bool = UNLOCK_WHEN_NO_REGULAR_CHAPTERS,
) -> bool:
    """
    True when every regular chapter is completed.

    An empty regular list returns `unlock_when_empty` (False by default), so
    a course made only of assessments never reveals them.
    """
    if not regular:
        return unlock_when_empty
    return all(is_chapter_completed(c, completion_map) for c in regular)


def assessments_unlocked(chapters: Iterable[Chapter], completion_map: Mapping[Any, Any]) -> bool:
    regular, _ = partition_chapters(chapters)
    return all_regular_completed(regular, completion_map)


# ==================== VISIBILITY ====================

def visible_chapters(chapters: Iterable[Chapter], completion_map: Mapping[Any, Any]) -> List[Chapter]:
    """
    Chapters the learner may see: regular chapters, followed by assessment
    chapters once all regular chapters are completed.
    """
    regular, assessment = partition_chapters(chapters)
    if all_regular_completed(regular, completion_map):
        return regular + assessment
    return regular


def gate_summary(chapters: Iterable[Chapter], completion_map: Mapping[Any, Any]) -> ChapterGateSummary:
    """Gate state for the course view sidebar"""
    regular, assessment = partition_chapters(chapters)
    unlocked = all_regular_completed(regular, completion_map)

    return ChapterGateSummary(
        regular_count=len(regular),
        assessment_count=len(assessment),
        completed_regular_count=sum(1 for c in regular if is_chapter_completed(c, completion_map)),
        assessments_unlocked=unlocked,
        visible=regular + assessment if unlocked else regular,
    )
