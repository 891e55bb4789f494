"""
Exam Layouts
Fixed structural shape of CIE and SEE papers and their default slot configuration.
"""
import re
from typing import Dict, List, Tuple, Union

from pydantic import BaseModel

from papergen.errors import MalformedSlotError, UnknownExamTypeError
from papergen.schemas import Difficulty, ExamType, QuestionSlot

PARTS: Tuple[str, ...] = ("a", "b", "c")
OPTIONAL_PART = "c"

_SLOT_ID_RE = re.compile(r"^(\d+)([a-z])$")


class ExamLayout(BaseModel):
    """Invariant structure of one exam type."""
    exam_type: ExamType
    title: str
    group_label: str
    group_count: int
    question_numbers: List[int]
    marks_per_question: int
    default_part_marks: Dict[str, int]
    default_part_difficulty: Dict[str, Difficulty]
    duration: str
    max_marks: int
    instructions: List[str]


CIE_LAYOUT = ExamLayout(
    exam_type=ExamType.CIE,
    title="CONTINUOUS INTERNAL EVALUATION",
    group_label="SECTION",
    group_count=3,
    question_numbers=[1, 2, 3],
    marks_per_question=15,
    default_part_marks={"a": 5, "b": 5, "c": 5},
    default_part_difficulty={"a": Difficulty.MEDIUM, "b": Difficulty.MEDIUM, "c": Difficulty.HARD},
    duration="1.5 Hours",
    max_marks=45,
    instructions=[
        "Answer all questions.",
        "Each section carries 15 marks.",
    ],
)

SEE_LAYOUT = ExamLayout(
    exam_type=ExamType.SEE,
    title="SEMESTER END EXAMINATION",
    group_label="MODULE",
    group_count=5,
    question_numbers=list(range(1, 11)),
    marks_per_question=20,
    default_part_marks={"a": 5, "b": 7, "c": 8},
    default_part_difficulty={"a": Difficulty.MEDIUM, "b": Difficulty.MEDIUM, "c": Difficulty.HARD},
    duration="3 Hours",
    max_marks=100,
    instructions=[
        "Answer one full question from each module.",
        "Each module carries 20 marks.",
    ],
)

_LAYOUTS = {ExamType.CIE: CIE_LAYOUT, ExamType.SEE: SEE_LAYOUT}


def resolve_exam_type(exam_type: Union[ExamType, str]) -> ExamType:
    """
    Normalize an exam type value.

    Raises:
        UnknownExamTypeError: If the value is not CIE or SEE.
    """
    if isinstance(exam_type, ExamType):
        return exam_type
    if isinstance(exam_type, str):
        try:
            return ExamType(exam_type.strip().upper())
        except ValueError:
            pass
    raise UnknownExamTypeError(exam_type)


def get_layout(exam_type: Union[ExamType, str]) -> ExamLayout:
    return _LAYOUTS[resolve_exam_type(exam_type)]


def parse_slot_id(slot_id: str) -> Tuple[int, str]:
    """
    Split a slot id into question number and part letter.

    Args:
        slot_id: Slot id such as "1a" or "10c".

    Returns:
        Tuple of (question_number, part).

    Raises:
        MalformedSlotError: If the id is not a number followed by a, b or c.
    """
    match = _SLOT_ID_RE.match(slot_id.strip().lower())
    if not match:
        raise MalformedSlotError(slot_id, "expected a question number followed by a part letter")
    part = match.group(2)
    if part not in PARTS:
        raise MalformedSlotError(slot_id, f"part must be one of {', '.join(PARTS)}")
    return int(match.group(1)), part


def check_slot_structure(layout: ExamLayout, slots: List[QuestionSlot]) -> None:
    """
    Reject slots that do not belong to the layout or repeat an id.

    Raises:
        MalformedSlotError: On the first offending slot.
    """
    seen = set()
    for slot in slots:
        position = parse_slot_id(slot.slot_id)
        question_number = position[0]
        if question_number not in layout.question_numbers:
            raise MalformedSlotError(
                slot.slot_id,
                f"question {question_number} is not part of a {layout.exam_type.value} paper",
            )
        if position in seen:
            raise MalformedSlotError(slot.slot_id, "duplicate slot id")
        seen.add(position)


def course_outcome_for(question_number: int) -> int:
    """SEE questions 1-2 map to CO1, 3-4 to CO2, and so on."""
    return (question_number + 1) // 2


def group_of(layout: ExamLayout, question_number: int) -> int:
    """Section number (CIE) or course outcome / module number (SEE)."""
    if layout.exam_type == ExamType.SEE:
        return course_outcome_for(question_number)
    return question_number


def group_title(layout: ExamLayout, group: int) -> str:
    if layout.exam_type == ExamType.SEE:
        return f"{layout.group_label} {group} (CO{group})"
    return f"{layout.group_label} {group}"


def default_slots(exam_type: Union[ExamType, str], include_optional: bool = True) -> List[QuestionSlot]:
    """
    Build the structural default slots for an exam type.

    Args:
        exam_type: CIE or SEE.
        include_optional: Whether the optional "c" parts start included.

    Returns:
        Slots in document order with default marks and difficulty, no topics.
    """
    layout = get_layout(exam_type)
    slots: List[QuestionSlot] = []
    for question_number in layout.question_numbers:
        for part in PARTS:
            slots.append(
                QuestionSlot(
                    slot_id=f"{question_number}{part}",
                    difficulty_target=layout.default_part_difficulty[part],
                    marks_target=layout.default_part_marks[part],
                    included=include_optional or part != OPTIONAL_PART,
                )
            )
    return slots
