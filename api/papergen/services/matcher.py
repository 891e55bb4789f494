"""
Question Matcher
Filters and ranks bank questions against a single slot.
"""
from typing import Iterable, List, Optional

from papergen.config import (
    CIE_MARKS_TOLERANCE,
    EXACT_MARKS_BONUS,
    SIMILARITY_WEIGHT,
    UNIT_MATCH_BONUS,
)
from papergen.schemas import CandidateQuestion, QuestionSlot


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def is_eligible(
    candidate: CandidateQuestion,
    slot: QuestionSlot,
    structural_hint: Optional[str] = None,
    tolerance: int = CIE_MARKS_TOLERANCE,
) -> bool:
    """
    Check whether a bank question may fill a slot.

    Difficulty must match case-insensitively and predicted marks must be
    within tolerance. Without a hint the topic filter must be contained in the
    matched topic; with a hint, a unit match is accepted in its place.
    """
    if candidate.difficulty.strip().lower() != slot.difficulty_target.value:
        return False
    if abs(candidate.predicted_marks - slot.marks_target) > tolerance:
        return False

    topic_match = not slot.topic_filter or _contains(candidate.matched_topic, slot.topic_filter)
    if structural_hint:
        unit_match = _contains(candidate.matched_unit, structural_hint)
        return unit_match or topic_match
    return topic_match


def score_candidate(
    candidate: CandidateQuestion,
    slot: QuestionSlot,
    structural_hint: Optional[str] = None,
) -> float:
    """Relevance score: similarity, exact marks bonus and unit bonus."""
    score = candidate.topic_similarity * SIMILARITY_WEIGHT
    if candidate.predicted_marks == slot.marks_target:
        score += EXACT_MARKS_BONUS
    if structural_hint and _contains(candidate.matched_unit, structural_hint):
        score += UNIT_MATCH_BONUS
    return score


def find_candidates(
    slot: QuestionSlot,
    pool: Iterable[CandidateQuestion],
    structural_hint: Optional[str] = None,
    tolerance: int = CIE_MARKS_TOLERANCE,
) -> List[CandidateQuestion]:
    """
    Rank the bank questions that fit a slot, best first.

    Args:
        slot: Slot to fill.
        pool: Candidate questions; not modified.
        structural_hint: Unit label such as "Unit 2", or None for topic-only matching.
        tolerance: Allowed distance between predicted and requested marks.

    Returns:
        Eligible candidates sorted by descending score. Equal scores keep
        their pool order. An empty list means fallback generation is needed.
    """
    eligible = [c for c in pool if is_eligible(c, slot, structural_hint, tolerance)]
    # sorted() is stable, so ties stay in pool order
    return sorted(eligible, key=lambda c: score_candidate(c, slot, structural_hint), reverse=True)
