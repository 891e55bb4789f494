"""
Test Pydantic Schemas
Data validation and parsing of slots, bank questions and layouts.
"""
import pytest
from pydantic import ValidationError

from papergen.errors import MalformedSlotError, UnknownExamTypeError
from papergen.layouts import (
    course_outcome_for,
    default_slots,
    get_layout,
    group_title,
    parse_slot_id,
)
from papergen.schemas import (
    AssignedQuestion,
    CandidateQuestion,
    Difficulty,
    QuestionBank,
    QuestionSlot,
    QuestionSource,
    Topic,
)


def test_slot_normalization():
    """Slot ids and difficulty are lower-cased, topics stripped."""
    slot = QuestionSlot(slot_id=" 1A ", difficulty_target="HARD", marks_target=5, topic_filter="  Paging ")
    assert slot.slot_id == "1a"
    assert slot.difficulty_target == Difficulty.HARD
    assert slot.topic_filter == "Paging"


def test_slot_defaults():
    """Slots default to included, medium difficulty and no topic."""
    slot = QuestionSlot(slot_id="2b", marks_target=5, topic_filter=None)
    assert slot.included is True
    assert slot.difficulty_target == Difficulty.MEDIUM
    assert slot.topic_filter == ""


def test_slot_rejects_non_positive_marks():
    with pytest.raises(ValidationError):
        QuestionSlot(slot_id="1a", marks_target=0)


def test_slot_rejects_unknown_difficulty():
    with pytest.raises(ValidationError):
        QuestionSlot(slot_id="1a", marks_target=5, difficulty_target="extreme")


def test_candidate_accepts_processing_service_keys():
    """Bank JSON uses 'question' and '_id'; both are accepted."""
    candidate = CandidateQuestion(**{
        "_id": "abc123",
        "question": "What is a semaphore?",
        "predicted_marks": 4,
        "bloom_level": "L1",
        "difficulty": "Easy",
    })
    assert candidate.id == "abc123"
    assert candidate.text == "What is a semaphore?"
    assert candidate.topic_similarity == 0.0


def test_candidate_is_read_only(make_candidate):
    """Pool entries cannot be mutated during assembly."""
    candidate = make_candidate()
    with pytest.raises(ValidationError):
        candidate.predicted_marks = 10


def test_candidate_similarity_range(make_candidate):
    with pytest.raises(ValidationError):
        make_candidate(topic_similarity=1.5)


def test_bank_topics_accept_topic_key():
    bank = QuestionBank(topics=[{"unit": "Unit 1", "topic_id": 1, "topic": "Processes"}])
    assert isinstance(bank.topics[0], Topic)
    assert bank.topics[0].topic_name == "Processes"
    assert bank.is_empty


def test_assigned_question_serializes_source():
    question = AssignedQuestion(
        slot_id="1a",
        marks=5,
        difficulty="easy",
        text="Define a process.",
        bloom_level="L1",
        source=QuestionSource.GENERATED,
    )
    assert question.model_dump(mode="json")["source"] == "ai_generated"


def test_parse_slot_id():
    assert parse_slot_id("1a") == (1, "a")
    assert parse_slot_id("10C") == (10, "c")
    with pytest.raises(MalformedSlotError):
        parse_slot_id("1d")
    with pytest.raises(MalformedSlotError):
        parse_slot_id("section1")


def test_layouts():
    """CIE has 3 sections of 15; SEE has 5 modules of 2 questions of 20."""
    cie = get_layout("cie")
    see = get_layout("SEE")
    assert cie.question_numbers == [1, 2, 3]
    assert cie.marks_per_question == 15
    assert see.question_numbers == list(range(1, 11))
    assert see.marks_per_question == 20
    assert group_title(see, 3) == "MODULE 3 (CO3)"
    assert group_title(cie, 2) == "SECTION 2"


def test_unknown_layout():
    with pytest.raises(UnknownExamTypeError):
        get_layout("MIDTERM")


def test_course_outcome_mapping():
    assert [course_outcome_for(n) for n in range(1, 11)] == [1, 1, 2, 2, 3, 3, 4, 4, 5, 5]


def test_default_slots():
    """Default SEE parts are 5/7/8 with the optional c part togglable."""
    slots = default_slots("SEE", include_optional=False)
    assert len(slots) == 30
    assert [s.marks_target for s in slots[:3]] == [5, 7, 8]
    assert [s.difficulty_target for s in slots[:3]] == [Difficulty.MEDIUM, Difficulty.MEDIUM, Difficulty.HARD]
    assert slots[2].included is False
    assert all(s.topic_filter == "" for s in slots)
