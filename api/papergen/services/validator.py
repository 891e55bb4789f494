"""
Configuration Validator
Checks slot-level invariants before a paper may be generated.
"""
from typing import Dict, List, Union

from papergen.errors import InvalidMarksTotalError, MissingTopicError, SlotValidationError
from papergen.layouts import check_slot_structure, get_layout, parse_slot_id
from papergen.schemas import ExamType, QuestionSlot


def marks_by_question(exam_type: Union[ExamType, str], slots: List[QuestionSlot]) -> Dict[int, int]:
    """Sum included marks per section (CIE) or question number (SEE)."""
    layout = get_layout(exam_type)
    totals = {number: 0 for number in layout.question_numbers}
    for slot in slots:
        if not slot.included:
            continue
        question_number, _ = parse_slot_id(slot.slot_id)
        totals[question_number] = totals.get(question_number, 0) + slot.marks_target
    return totals


def find_violations(exam_type: Union[ExamType, str], slots: List[QuestionSlot]) -> List[SlotValidationError]:
    """
    Collect every marks and topic violation in a slot configuration.

    Args:
        exam_type: CIE or SEE.
        slots: Educator's slot configuration.

    Returns:
        Violations in reporting order: mark totals by question number, then
        one MissingTopicError listing every included slot without a topic.

    Raises:
        UnknownExamTypeError: If exam_type is not CIE or SEE.
        MalformedSlotError: If a slot id does not fit the layout.
    """
    layout = get_layout(exam_type)
    check_slot_structure(layout, slots)

    violations: List[SlotValidationError] = []
    for question_number, total in marks_by_question(layout.exam_type, slots).items():
        if total != layout.marks_per_question:
            violations.append(
                InvalidMarksTotalError(
                    layout.exam_type.value,
                    str(question_number),
                    total,
                    layout.marks_per_question,
                )
            )

    missing = [slot.slot_id for slot in slots if slot.included and not slot.topic_filter.strip()]
    if missing:
        violations.append(MissingTopicError(missing))

    return violations


def validate_slots(exam_type: Union[ExamType, str], slots: List[QuestionSlot]) -> None:
    """
    Gate generation on a valid slot configuration.

    Raises:
        InvalidMarksTotalError: If a section/question does not total its target.
        MissingTopicError: If an included slot has no topic.
        UnknownExamTypeError: If exam_type is not CIE or SEE.
        MalformedSlotError: If a slot id does not fit the layout.
    """
    violations = find_violations(exam_type, slots)
    if violations:
        raise violations[0]
