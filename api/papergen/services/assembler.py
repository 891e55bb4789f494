"""
Paper Assembly Engine
Walks the exam structure slot by slot, taking the best bank match or a
templated fallback for each included slot.
"""
import logging
import random
from typing import Iterator, List, Optional, Sequence, Set, Tuple, Union

from papergen.config import GenerationSettings
from papergen.layouts import (
    ExamLayout,
    check_slot_structure,
    course_outcome_for,
    get_layout,
    parse_slot_id,
)
from papergen.schemas import (
    AssignedQuestion,
    CandidateQuestion,
    ExamType,
    QuestionBank,
    QuestionSlot,
    QuestionSource,
)
from papergen.services.fallback import generate_fallback
from papergen.services.matcher import find_candidates

log = logging.getLogger(__name__)


def _slots_for(slots: Sequence[QuestionSlot], question_number: int) -> List[QuestionSlot]:
    return [
        slot for slot in slots
        if slot.included and parse_slot_id(slot.slot_id)[0] == question_number
    ]


def _walk(layout: ExamLayout, slots: Sequence[QuestionSlot]) -> Iterator[Tuple[QuestionSlot, int, Optional[str], Optional[int]]]:
    """Yield (slot, group, structural_hint, course_outcome) in document order."""
    if layout.exam_type == ExamType.CIE:
        for section in layout.question_numbers:
            hint = f"Unit {section}"
            for slot in _slots_for(slots, section):
                yield slot, section, hint, None
    else:
        for co in range(1, layout.group_count + 1):
            for alternative in (1, 2):
                question_number = (co - 1) * 2 + alternative
                for slot in _slots_for(slots, question_number):
                    yield slot, co, None, course_outcome_for(question_number)


def from_bank(
    slot: QuestionSlot,
    candidate: CandidateQuestion,
    course_outcome: Optional[int] = None,
) -> AssignedQuestion:
    """Copy a bank question's descriptive fields onto a slot."""
    return AssignedQuestion(
        slot_id=slot.slot_id,
        marks=slot.marks_target,
        difficulty=slot.difficulty_target,
        topic_filter=slot.topic_filter,
        text=candidate.text,
        bloom_level=candidate.bloom_level,
        topic=candidate.matched_topic,
        unit=candidate.matched_unit,
        source=QuestionSource.FROM_BANK,
        similarity=candidate.topic_similarity,
        original_id=candidate.id,
        course_outcome=course_outcome,
    )


def assemble(
    exam_type: Union[ExamType, str],
    slots: Sequence[QuestionSlot],
    pool: Optional[QuestionBank] = None,
    settings: Optional[GenerationSettings] = None,
    rng: Optional[random.Random] = None,
) -> List[AssignedQuestion]:
    """
    Assemble one AssignedQuestion per included slot.

    Args:
        exam_type: CIE or SEE.
        slots: Slot configuration; order within a section/question is kept.
        pool: Question bank snapshot. None or empty means every slot falls back.
        settings: Tolerances and fallback behaviour. Defaults apply when None.
        rng: Random source for fallback choice; seeded from settings when None.

    Returns:
        Assigned questions in document order.

    Raises:
        UnknownExamTypeError: If exam_type is not CIE or SEE.
        MalformedSlotError: If a slot id does not fit the layout.
    """
    layout = get_layout(exam_type)
    settings = settings or GenerationSettings()
    if not slots:
        return []
    check_slot_structure(layout, list(slots))

    rng = rng or random.Random(settings.random_seed)
    questions = list(pool.questions) if pool else []
    tolerance = (
        settings.cie_marks_tolerance
        if layout.exam_type == ExamType.CIE
        else settings.see_marks_tolerance
    )

    used_ids: Set[str] = set()
    assigned: List[AssignedQuestion] = []
    for slot, group, hint, course_outcome in _walk(layout, slots):
        candidates = find_candidates(slot, questions, hint, tolerance)
        if not settings.allow_repeats:
            candidates = [c for c in candidates if str(c.id) not in used_ids]

        if candidates:
            chosen = candidates[0]
            used_ids.add(str(chosen.id))
            log.debug("Slot %s filled from bank question %s", slot.slot_id, chosen.id)
            assigned.append(from_bank(slot, chosen, course_outcome))
        else:
            log.debug("Slot %s has no bank match, generating fallback", slot.slot_id)
            assigned.append(
                generate_fallback(
                    slot,
                    hint,
                    group,
                    course_outcome=course_outcome,
                    deterministic=settings.deterministic_fallback,
                    rng=rng,
                    default_topics=settings.default_topics,
                )
            )

    from_bank_count = sum(1 for a in assigned if a.source == QuestionSource.FROM_BANK)
    log.info(
        "Assembled %s paper: %d questions (%d from bank, %d generated)",
        layout.exam_type.value,
        len(assigned),
        from_bank_count,
        len(assigned) - from_bank_count,
    )
    return assigned
