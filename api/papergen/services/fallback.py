"""
Fallback Question Generator
Fills a slot from phrasing templates when the bank has no suitable question.
"""
import random
from typing import Optional, Sequence

from papergen.config import DEFAULT_TOPICS, get_fallback_templates
from papergen.schemas import AssignedQuestion, BloomLevel, Difficulty, QuestionSlot, QuestionSource

BLOOM_BY_DIFFICULTY = {
    Difficulty.EASY: BloomLevel.L1,
    Difficulty.MEDIUM: BloomLevel.L3,
    Difficulty.HARD: BloomLevel.L5,
}


def selection_key(slot: QuestionSlot, group: int) -> int:
    """Positional key for deterministic template choice."""
    return len(slot.slot_id) + slot.marks_target + group


def generate_fallback(
    slot: QuestionSlot,
    structural_hint: Optional[str],
    group: int,
    course_outcome: Optional[int] = None,
    deterministic: bool = False,
    rng: Optional[random.Random] = None,
    default_topics: Sequence[str] = DEFAULT_TOPICS,
) -> AssignedQuestion:
    """
    Generate a templated question for a slot.

    Args:
        slot: Slot to fill.
        structural_hint: Unit label for CIE ("Unit 1"), None for SEE.
        group: Section number (CIE) or course outcome (SEE).
        course_outcome: Course outcome recorded on the result (SEE only).
        deterministic: Choose template and default topic from the positional key.
        rng: Random source for non-deterministic choice.
        default_topics: Topics used when the slot has no topic filter.

    Returns:
        AssignedQuestion with source GENERATED and no similarity score.
    """
    rng = rng or random.Random()
    templates = get_fallback_templates(slot.difficulty_target.value)
    key = selection_key(slot, group)

    if slot.topic_filter:
        topic = slot.topic_filter
    elif deterministic:
        topic = default_topics[key % len(default_topics)]
    else:
        topic = rng.choice(list(default_topics))

    if deterministic:
        template = templates[key % len(templates)]
    else:
        template = rng.choice(templates)

    return AssignedQuestion(
        slot_id=slot.slot_id,
        marks=slot.marks_target,
        difficulty=slot.difficulty_target,
        topic_filter=slot.topic_filter,
        text=template.format(topic=topic),
        bloom_level=BLOOM_BY_DIFFICULTY[slot.difficulty_target],
        topic=topic,
        unit=structural_hint or "General",
        source=QuestionSource.GENERATED,
        course_outcome=course_outcome,
    )
