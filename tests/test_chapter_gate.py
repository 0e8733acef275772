"""
tests/test_chapter_gate.py

Assessment chapters stay hidden until every regular chapter is completed.
"""

import pytest
from pydantic import ValidationError

from app.courses.chapter_gate import (
    ChapterKind,
    all_regular_completed,
    assessments_unlocked,
    classify_chapter,
    gate_summary,
    is_assessment_title,
    partition_chapters,
    visible_chapters,
)
from app.courses.models import Chapter


def _chapters(*titles):
    return [Chapter(id=i + 1, title=t, order=i + 1) for i, t in enumerate(titles)]


def _titles(chapters):
    return [c.title for c in chapters]


# ==================== CLASSIFICATION ====================

@pytest.mark.parametrize("title", [
    "Final_Assignment",
    "Unit Test 1",
    "MIDTERM EXAM",
    "The Final Stretch",
    "assignment: build a VPC",
])
def test_keyword_titles_are_assessments(title):
    assert is_assessment_title(title)
    assert classify_chapter(title) == ChapterKind.ASSESSMENT
    assert Chapter(id=1, title=title).kind == ChapterKind.ASSESSMENT


@pytest.mark.parametrize("title", ["Intro", "Chapter 2: AWS Basics", "AWS_ec2", ""])
def test_other_titles_are_regular(title):
    assert not is_assessment_title(title)
    assert Chapter(id=1, title=title).kind == ChapterKind.REGULAR


def test_explicit_kind_wins_over_title():
    chapter = Chapter(id=7, title="Exam Preparation Overview", kind=ChapterKind.REGULAR)
    assert chapter.kind == ChapterKind.REGULAR
    assert not chapter.is_assessment

    quiz = Chapter(id=8, title="Wrap-up quiz", kind="assessment")
    assert quiz.is_assessment


def test_chapter_is_immutable():
    chapter = Chapter(id=1, title="Intro")
    with pytest.raises(ValidationError):
        chapter.title = "Final"


def test_partition_keeps_relative_order():
    chapters = _chapters("Intro", "Test 1", "Basics", "Final Exam", "Advanced")
    regular, assessment = partition_chapters(chapters)

    assert _titles(regular) == ["Intro", "Basics", "Advanced"]
    assert _titles(assessment) == ["Test 1", "Final Exam"]


# ==================== VISIBILITY ====================

def test_all_regular_completed_shows_everything():
    chapters = _chapters("Intro", "Basics", "Final_Assignment")
    visible = visible_chapters(chapters, {1: True, 2: True})

    assert _titles(visible) == ["Intro", "Basics", "Final_Assignment"]


def test_incomplete_regular_hides_assessments():
    chapters = _chapters("Intro", "Basics", "Final_Assignment")
    visible = visible_chapters(chapters, {1: True, 2: False})

    assert _titles(visible) == ["Intro", "Basics"]


def test_assessments_move_after_regular_chapters():
    chapters = _chapters("Intro", "Quiz Test", "Basics", "Wrap up")
    visible = visible_chapters(chapters, {1: True, 3: True, 4: True})

    assert _titles(visible) == ["Intro", "Basics", "Wrap up", "Quiz Test"]


def test_no_assessments_returns_input_unchanged():
    chapters = _chapters("Intro", "Basics", "Advanced")

    assert visible_chapters(chapters, {}) == chapters
    assert visible_chapters(chapters, {1: True, 2: True, 3: True}) == chapters


def test_no_regular_chapters_never_unlocks():
    chapters = _chapters("Test 1", "Final Exam")
    everything_done = {1: True, 2: True}

    assert visible_chapters(chapters, everything_done) == []
    assert not assessments_unlocked(chapters, everything_done)


def test_empty_regular_policy_can_be_overridden():
    assert all_regular_completed([], {}) is False
    assert all_regular_completed([], {}, unlock_when_empty=True) is True


@pytest.mark.parametrize("value", ["yes", 1, "true", None, "True"])
def test_malformed_completion_counts_as_incomplete(value):
    chapters = _chapters("Intro", "Final Exam")
    assert _titles(visible_chapters(chapters, {1: value})) == ["Intro"]


def test_not_enrolled_learner_sees_regular_only():
    chapters = _chapters("Intro", "Final Exam")

    assert _titles(visible_chapters(chapters, {})) == ["Intro"]
    assert _titles(visible_chapters(chapters, None)) == ["Intro"]


def test_completion_map_keyed_by_string_ids():
    chapters = [
        Chapter(id="ch-intro", title="Intro"),
        Chapter(id="ch-final", title="Final_Assignment"),
    ]
    assert len(visible_chapters(chapters, {"ch-intro": True})) == 2
    # ids are matched exactly, no str/int coercion
    assert len(visible_chapters(_chapters("Intro", "Final"), {"1": True})) == 1


# ==================== SUMMARY ====================

def test_gate_summary_counts():
    chapters = _chapters("Intro", "Basics", "Advanced", "Final Exam")
    summary = gate_summary(chapters, {1: True, 2: True})

    assert summary.regular_count == 3
    assert summary.assessment_count == 1
    assert summary.completed_regular_count == 2
    assert summary.assessments_unlocked is False
    assert _titles(summary.visible) == ["Intro", "Basics", "Advanced"]

    summary = gate_summary(chapters, {1: True, 2: True, 3: True})
    assert summary.assessments_unlocked is True
    assert _titles(summary.visible)[-1] == "Final Exam"
