"""
Question Bank Utilities
Snapshot selection, filtering and statistics over processed question banks.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from papergen.config import FILTER_MARKS_TOLERANCE
from papergen.schemas import (
    BankSnapshot,
    BankStatistics,
    BloomLevel,
    CandidateQuestion,
    ProcessingStatus,
    QuestionBank,
)

MARKS_BUCKETS = (("1-3", 1, 3), ("4-6", 4, 6), ("7-10", 7, 10))
OPEN_BUCKET = "11+"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _uploaded_key(snapshot: BankSnapshot) -> datetime:
    uploaded = snapshot.uploaded_at
    if uploaded is None:
        return _EPOCH
    if uploaded.tzinfo is None:
        return uploaded.replace(tzinfo=timezone.utc)
    return uploaded


def select_latest_completed(snapshots: Sequence[BankSnapshot]) -> QuestionBank:
    """
    Pick the one bank eligible for generation.

    Only COMPLETED snapshots qualify; the highest version wins, then the most
    recent upload. Versions are never merged.

    Returns:
        The selected bank, or an empty bank when nothing has completed.
    """
    completed = [s for s in snapshots if s.status == ProcessingStatus.COMPLETED]
    if not completed:
        return QuestionBank()
    latest = max(completed, key=lambda s: (s.version, _uploaded_key(s)))
    return latest.bank


def filter_questions(
    bank: QuestionBank,
    difficulty: Optional[str] = None,
    bloom_level: Optional[BloomLevel] = None,
    unit: Optional[str] = None,
    marks: Optional[int] = None,
    tolerance: int = FILTER_MARKS_TOLERANCE,
) -> List[CandidateQuestion]:
    """
    Browse a bank with optional filters. Unset filters are ignored.

    Args:
        bank: Question bank to search.
        difficulty: Case-insensitive difficulty.
        bloom_level: Exact Bloom level.
        unit: Case-insensitive substring of the matched unit.
        marks: Predicted marks, matched within tolerance.
        tolerance: Allowed marks distance.

    Returns:
        Matching questions in bank order.
    """
    questions = list(bank.questions)
    if difficulty:
        wanted = difficulty.strip().lower()
        questions = [q for q in questions if q.difficulty.strip().lower() == wanted]
    if bloom_level:
        questions = [q for q in questions if q.bloom_level == bloom_level]
    if unit:
        questions = [q for q in questions if unit.lower() in q.matched_unit.lower()]
    if marks:
        questions = [q for q in questions if abs(q.predicted_marks - marks) <= tolerance]
    return questions


def _marks_bucket(marks: int) -> Optional[str]:
    for label, low, high in MARKS_BUCKETS:
        if low <= marks <= high:
            return label
    if marks > MARKS_BUCKETS[-1][2]:
        return OPEN_BUCKET
    return None


def bank_statistics(bank: QuestionBank) -> BankStatistics:
    """Summarize a bank by difficulty, Bloom level, marks and unit."""
    questions = bank.questions

    difficulty: Dict[str, int] = {"easy": 0, "medium": 0, "hard": 0}
    for q in questions:
        key = q.difficulty.strip().lower()
        if key in difficulty:
            difficulty[key] += 1

    bloom = {level.value: 0 for level in BloomLevel}
    for q in questions:
        bloom[q.bloom_level.value] += 1

    marks = {label: 0 for label, _, _ in MARKS_BUCKETS}
    marks[OPEN_BUCKET] = 0
    for q in questions:
        bucket = _marks_bucket(q.predicted_marks)
        if bucket:
            marks[bucket] += 1

    units: Dict[str, int] = {}
    for q in questions:
        if q.matched_unit:
            units[q.matched_unit] = units.get(q.matched_unit, 0) + 1

    average = sum(q.topic_similarity for q in questions) / len(questions) if questions else 0.0

    return BankStatistics(
        total_questions=len(questions),
        total_topics=len(bank.topics),
        difficulty_distribution=difficulty,
        bloom_level_distribution=bloom,
        marks_distribution=marks,
        unit_distribution=units,
        average_similarity=average,
    )
