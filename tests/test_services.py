"""
Test Services
Document generation of CIE and SEE papers.
"""
import pytest
from docx import Document

from papergen.errors import MalformedSlotError
from papergen.services.doc_generator import generate_docx
from papergen.services.generator import generate_paper


def _paragraph_text(path) -> str:
    doc = Document(str(path))
    return "\n".join(para.text for para in doc.paragraphs)


def test_docx_structure(cie_config, sample_bank, tmp_path):
    """Test that generated DOCX has header, sections and questions."""
    output_path = tmp_path / "cie_paper.docx"
    paper = generate_paper(cie_config, sample_bank, exam_date="2026-11-02")

    generate_docx(paper, str(output_path))

    assert output_path.exists()
    text = _paragraph_text(output_path)
    assert "CONTINUOUS INTERNAL EVALUATION" in text
    assert "Course: Operating Systems (OS)" in text
    assert "Date: 2026-11-02" in text
    assert "Answer all questions." in text
    assert "SECTION 1" in text
    assert "SECTION 3" in text
    assert "1A. Explain the process state diagram." in text
    assert "[Source: Question Bank | Similarity: 90.0%]" in text
    assert "*** END OF QUESTION PAPER ***" in text


def test_docx_metadata(cie_config, sample_bank, tmp_path):
    """Test that document metadata is set correctly."""
    output_path = tmp_path / "metadata.docx"
    paper = generate_paper(cie_config, sample_bank)

    generate_docx(paper, str(output_path))

    doc = Document(str(output_path))
    assert doc.core_properties.title == "CIE - OS - Semester 5"
    assert doc.core_properties.subject == "Operating Systems (OS)"


def test_docx_see_alternatives(see_config, tmp_path):
    """SEE documents list both alternatives of each module separated by OR."""
    output_path = tmp_path / "see_paper.docx"
    paper = generate_paper(see_config, None)

    generate_docx(paper, str(output_path))

    doc = Document(str(output_path))
    paragraphs = [para.text for para in doc.paragraphs]
    assert paragraphs.count("OR") == 5
    assert "Question 1:" in paragraphs
    assert "Question 10:" in paragraphs
    assert "MODULE 5 (CO5)" in paragraphs
    assert "Date: ____________ | Duration: 3 Hours | Max Marks: 100" in paragraphs


def test_docx_rejects_question_outside_layout(cie_config, sample_bank, tmp_path):
    """A question with no place in the layout fails instead of vanishing."""
    output_path = tmp_path / "stray.docx"
    paper = generate_paper(cie_config, sample_bank)
    stray = paper.assigned[0].model_copy(update={"slot_id": "4a", "text": "Stray question"})
    paper = paper.model_copy(update={"assigned": paper.assigned + [stray]})

    with pytest.raises(MalformedSlotError) as excinfo:
        generate_docx(paper, str(output_path))

    assert excinfo.value.slot_id == "4a"
    assert not output_path.exists()
