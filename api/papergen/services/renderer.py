"""
Layout Renderer
Formats assigned questions into the fixed plain-text question paper.
"""
from typing import Dict, List, Optional, Sequence, Union

from papergen.errors import MalformedSlotError
from papergen.layouts import ExamLayout, get_layout, group_title, parse_slot_id
from papergen.schemas import AssignedQuestion, ExamType, QuestionSource

PAGE_WIDTH = 72
BANNER = "=" * PAGE_WIDTH
GROUP_DELIMITER = "-" * PAGE_WIDTH
OR_SEPARATOR = "OR"
FOOTER_TEXT = "*** END OF QUESTION PAPER ***"
BLANK_DATE = "____________"


def _centered(text: str) -> str:
    return text.center(PAGE_WIDTH).rstrip()


def _question_lines(question: AssignedQuestion) -> List[str]:
    lines = [
        f"{question.slot_id.upper()}. {question.text}",
        f"    [{question.marks} Marks | {question.difficulty.value.capitalize()} | {question.bloom_level.value}]",
    ]
    if question.source == QuestionSource.FROM_BANK and question.similarity is not None:
        lines.append(
            f"    [Source: Question Bank | Similarity: {question.similarity * 100:.1f}%]"
        )
    lines.append("")
    return lines


def group_by_question(layout: ExamLayout, assigned: Sequence[AssignedQuestion]) -> Dict[int, List[AssignedQuestion]]:
    grouped: Dict[int, List[AssignedQuestion]] = {n: [] for n in layout.question_numbers}
    for question in assigned:
        question_number, _ = parse_slot_id(question.slot_id)
        if question_number not in grouped:
            raise MalformedSlotError(
                question.slot_id,
                f"question {question_number} is not part of a {layout.exam_type.value} paper",
            )
        grouped[question_number].append(question)
    return grouped


def render(
    exam_type: Union[ExamType, str],
    course: str,
    semester: str,
    assigned: Sequence[AssignedQuestion],
    exam_date: Optional[str] = None,
) -> str:
    """
    Render the question paper as plain text.

    Args:
        exam_type: CIE or SEE.
        course: Course label printed in the header.
        semester: Semester printed in the header.
        assigned: Assigned questions in document order.
        exam_date: Date printed in the header; a blank line to fill in when None.

    Returns:
        The formatted paper. Identical input gives identical output.

    Raises:
        UnknownExamTypeError: If exam_type is not CIE or SEE.
        MalformedSlotError: If an assigned question does not fit the layout.
    """
    layout = get_layout(exam_type)
    grouped = group_by_question(layout, assigned)

    lines: List[str] = [
        BANNER,
        _centered(layout.title),
        BANNER,
        f"Course: {course}",
        f"Semester: {semester}",
        f"Date: {exam_date or BLANK_DATE}",
        f"Duration: {layout.duration}",
        f"Max Marks: {layout.max_marks}",
        "",
        "Instructions:",
    ]
    lines.extend(f"  {index}. {text}" for index, text in enumerate(layout.instructions, start=1))
    lines.append("")

    if layout.exam_type == ExamType.CIE:
        for section in layout.question_numbers:
            lines.extend([GROUP_DELIMITER, f"{group_title(layout, section)} [{layout.marks_per_question} Marks]", ""])
            for question in grouped[section]:
                lines.extend(_question_lines(question))
    else:
        for co in range(1, layout.group_count + 1):
            lines.extend([GROUP_DELIMITER, f"{group_title(layout, co)} [{layout.marks_per_question} Marks]", ""])
            for alternative in (1, 2):
                question_number = (co - 1) * 2 + alternative
                lines.append(f"Question {question_number}:")
                for question in grouped[question_number]:
                    lines.extend(_question_lines(question))
                if alternative == 1:
                    lines.extend([_centered(OR_SEPARATOR), ""])

    lines.extend([BANNER, _centered(FOOTER_TEXT), BANNER])
    return "\n".join(lines) + "\n"


def split_blocks(rendered: str) -> List[str]:
    """Return the section/module blocks of a rendered paper, header excluded."""
    return rendered.split(f"\n{GROUP_DELIMITER}\n")[1:]
