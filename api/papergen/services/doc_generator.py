"""
Document Generator Service
Handles .docx export of a generated question paper.
"""
import logging

from docx import Document
from docx.shared import Inches, Pt

from papergen.layouts import get_layout, group_title
from papergen.schemas import AssignedQuestion, ExamType, GeneratedPaper, QuestionSource
from papergen.services.renderer import group_by_question

log = logging.getLogger(__name__)


def _add_question(doc: Document, item: AssignedQuestion) -> None:
    p = doc.add_paragraph()
    p.paragraph_format.space_before = Pt(8)
    run = p.add_run(f"{item.slot_id.upper()}. {item.text}")
    run.bold = True

    p_meta = doc.add_paragraph()
    p_meta.paragraph_format.left_indent = Inches(0.5)
    meta = p_meta.add_run(
        f"[{item.marks} Marks | {item.difficulty.value.capitalize()} | {item.bloom_level.value}]"
    )
    meta.italic = True
    meta.font.size = Pt(10)

    if item.source == QuestionSource.FROM_BANK and item.similarity is not None:
        p_src = doc.add_paragraph()
        p_src.paragraph_format.left_indent = Inches(0.5)
        src = p_src.add_run(
            f"[Source: Question Bank | Similarity: {item.similarity * 100:.1f}%]"
        )
        src.italic = True
        src.font.size = Pt(10)


def generate_docx(paper: GeneratedPaper, output_path: str) -> None:
    """
    Generates a .docx file from a GeneratedPaper.

    Args:
        paper: Generated paper to export.
        output_path: Absolute path where the .docx file should be saved.

    Raises:
        MalformedSlotError: If an assigned question does not fit the layout.
    """
    log.info("Generating DOCX at %s", output_path)
    layout = get_layout(paper.exam_type)
    grouped = group_by_question(layout, paper.assigned)
    doc = Document()

    core_properties = doc.core_properties
    core_properties.title = paper.title
    core_properties.subject = paper.course

    style = doc.styles['Normal']
    style.font.size = Pt(12)

    heading = doc.add_heading(layout.title, 0)
    heading.alignment = 1  # Center

    p_info = doc.add_paragraph()
    p_info.alignment = 1
    p_info.add_run(f"Course: {paper.course}").bold = True
    p_info.add_run(f" | Semester: {paper.semester}")

    p_exam = doc.add_paragraph()
    p_exam.alignment = 1
    p_exam.add_run(
        f"Date: {paper.exam_date or '____________'} | "
        f"Duration: {layout.duration} | Max Marks: {layout.max_marks}"
    )

    doc.add_heading("Instructions", level=2)
    for text in layout.instructions:
        doc.add_paragraph(text, style="List Number")

    if layout.exam_type == ExamType.CIE:
        for section in layout.question_numbers:
            doc.add_heading(group_title(layout, section), level=1)
            for item in grouped[section]:
                _add_question(doc, item)
    else:
        for co in range(1, layout.group_count + 1):
            doc.add_heading(group_title(layout, co), level=1)
            for alternative in (1, 2):
                question_number = (co - 1) * 2 + alternative
                doc.add_paragraph(f"Question {question_number}:").runs[0].bold = True
                for item in grouped[question_number]:
                    _add_question(doc, item)
                if alternative == 1:
                    doc.add_paragraph("OR").alignment = 1

    doc.add_paragraph("_" * 50).alignment = 1  # Divider
    doc.add_paragraph("*** END OF QUESTION PAPER ***").alignment = 1

    doc.save(output_path)
    log.info("DOCX saved: %s", output_path)
