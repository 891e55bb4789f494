"""
Pytest Configuration & Shared Fixtures
"""
from typing import List

import pytest

from papergen.config import GenerationSettings
from papergen.layouts import default_slots, parse_slot_id
from papergen.schemas import CandidateQuestion, ExamConfiguration, QuestionBank, QuestionSlot

CIE_TOPICS = {1: "Process Management", 2: "Memory Management", 3: "File Systems"}
SEE_TOPICS = [
    "Process Management",
    "Memory Management",
    "File Systems",
    "CPU Scheduling",
    "Deadlocks",
]


def _with_topics(slots: List[QuestionSlot], topic_for) -> List[QuestionSlot]:
    updated = []
    for slot in slots:
        question_number, _ = parse_slot_id(slot.slot_id)
        updated.append(slot.model_copy(update={"topic_filter": topic_for(question_number)}))
    return updated


@pytest.fixture
def make_candidate():
    """Factory for bank questions with sensible defaults."""
    def _make(**overrides) -> CandidateQuestion:
        data = {
            "id": 1,
            "question": "Explain the process state diagram.",
            "predicted_marks": 5,
            "bloom_level": "L2",
            "difficulty": "Medium",
            "matched_topic": "Process Management and Scheduling",
            "matched_unit": "Unit 1",
            "topic_similarity": 0.9,
        }
        data.update(overrides)
        return CandidateQuestion(**data)
    return _make


@pytest.fixture
def make_slot():
    """Factory for a single included slot."""
    def _make(**overrides) -> QuestionSlot:
        data = {
            "slot_id": "1a",
            "difficulty_target": "medium",
            "marks_target": 5,
            "included": True,
            "topic_filter": "Process Management",
        }
        data.update(overrides)
        return QuestionSlot(**data)
    return _make


@pytest.fixture
def sample_bank(make_candidate) -> QuestionBank:
    """A small operating systems bank as produced by the processing service."""
    return QuestionBank(
        questions=[
            make_candidate(id=1),
            make_candidate(
                id=2,
                question="Describe paging with an example.",
                bloom_level="L3",
                matched_topic="Memory Management",
                matched_unit="Unit 2",
                topic_similarity=0.8,
            ),
            make_candidate(
                id=3,
                question="Design a deadlock avoidance scheme for a banking system.",
                bloom_level="L5",
                difficulty="Hard",
                matched_topic="Process Management",
                matched_unit="Unit 1",
                topic_similarity=0.7,
            ),
            make_candidate(
                id=4,
                question="What is a file allocation table?",
                predicted_marks=6,
                bloom_level="L1",
                difficulty="Easy",
                matched_topic="File Systems",
                matched_unit="Unit 3",
                topic_similarity=0.6,
            ),
        ],
        topics=[
            {"unit": "Unit 1", "topic_id": 1, "topic": "Process Management"},
            {"unit": "Unit 2", "topic_id": 2, "topic": "Memory Management"},
            {"unit": "Unit 3", "topic_id": 3, "topic": "File Systems"},
        ],
    )


@pytest.fixture
def cie_slots() -> List[QuestionSlot]:
    """Default CIE slots (all parts included) with one topic per section."""
    return _with_topics(default_slots("CIE"), lambda number: CIE_TOPICS[number])


@pytest.fixture
def see_slots() -> List[QuestionSlot]:
    """Default SEE slots (all parts included) with one topic per module."""
    return _with_topics(default_slots("SEE"), lambda number: SEE_TOPICS[(number - 1) // 2])


@pytest.fixture
def cie_config(cie_slots) -> ExamConfiguration:
    return ExamConfiguration(exam_type="CIE", semester="5", course_code="OS", slots=cie_slots)


@pytest.fixture
def see_config(see_slots) -> ExamConfiguration:
    return ExamConfiguration(exam_type="SEE", semester="5", course_code="OS", slots=see_slots)


@pytest.fixture
def deterministic_settings() -> GenerationSettings:
    return GenerationSettings(deterministic_fallback=True)
