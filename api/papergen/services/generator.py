"""
Paper Generation Service
Validates a configuration, assembles the paper and renders it.
"""
import logging
from typing import Dict, List, Optional

from papergen.config import GenerationSettings, get_course_name
from papergen.layouts import ExamLayout, get_layout, group_of, group_title, parse_slot_id
from papergen.schemas import (
    AssignedQuestion,
    ExamConfiguration,
    GeneratedPaper,
    GenerationSource,
    PaperStats,
    QuestionBank,
    QuestionSource,
)
from papergen.services.assembler import assemble
from papergen.services.renderer import render
from papergen.services.validator import validate_slots

log = logging.getLogger(__name__)


def course_label(config: ExamConfiguration) -> str:
    """Human course label, e.g. 'Operating Systems (OS)'."""
    name = config.course_name or get_course_name(config.course_code)
    if name == config.course_code:
        return config.course_code
    return f"{name} ({config.course_code})"


def paper_title(config: ExamConfiguration, layout: ExamLayout) -> str:
    return f"{layout.exam_type.value} - {config.course_code} - Semester {config.semester}"


def compute_stats(layout: ExamLayout, assigned: List[AssignedQuestion]) -> PaperStats:
    """Count bank and generated questions, overall and per section/module."""
    breakdown: Dict[str, int] = {}
    for number in layout.question_numbers:
        breakdown.setdefault(group_title(layout, group_of(layout, number)), 0)
    for question in assigned:
        question_number, _ = parse_slot_id(question.slot_id)
        label = group_title(layout, group_of(layout, question_number))
        breakdown[label] += 1

    from_bank = sum(1 for q in assigned if q.source == QuestionSource.FROM_BANK)
    return PaperStats(
        total=len(assigned),
        from_bank=from_bank,
        generated=len(assigned) - from_bank,
        breakdown=breakdown,
    )


def generation_source(stats: PaperStats) -> GenerationSource:
    if stats.total and stats.from_bank == stats.total:
        return GenerationSource.PROCESSED_DATA
    if stats.from_bank == 0:
        return GenerationSource.AI_GENERATED
    return GenerationSource.HYBRID


def generate_paper(
    config: ExamConfiguration,
    bank: Optional[QuestionBank] = None,
    settings: Optional[GenerationSettings] = None,
    use_question_bank: bool = True,
    exam_date: Optional[str] = None,
) -> GeneratedPaper:
    """
    Build a complete question paper from an exam configuration.

    Args:
        config: Exam type, course, semester and slots.
        bank: Latest completed question bank snapshot, if any.
        settings: Generation settings; defaults apply when None.
        use_question_bank: When False every slot uses fallback generation.
        exam_date: Date printed on the paper.

    Returns:
        GeneratedPaper with assigned questions, rendered text and statistics.

    Raises:
        SlotValidationError: If marks totals or topics are invalid.
        UnknownExamTypeError: If the exam type is not CIE or SEE.
        MalformedSlotError: If a slot id does not fit the layout.
    """
    layout = get_layout(config.exam_type)
    validate_slots(layout.exam_type, config.slots)

    pool = bank if use_question_bank else None
    if pool is None or pool.is_empty:
        log.info("No question bank available for %s, using fallback generation", config.course_code)

    assigned = assemble(layout.exam_type, config.slots, pool, settings)
    course = course_label(config)
    rendered = render(layout.exam_type, course, config.semester, assigned, exam_date=exam_date)
    stats = compute_stats(layout, assigned)

    return GeneratedPaper(
        title=paper_title(config, layout),
        exam_type=layout.exam_type,
        course=course,
        semester=config.semester,
        exam_date=exam_date,
        total_marks=sum(q.marks for q in assigned),
        generation_source=generation_source(stats),
        assigned=assigned,
        rendered_text=rendered,
        stats=stats,
    )
