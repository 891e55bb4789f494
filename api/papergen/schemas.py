"""
Data Schemas for Paper Generation
Pydantic models for slots, question bank entries, assigned questions and papers.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ExamType(str, Enum):
    """Supported exam formats."""
    CIE = "CIE"
    SEE = "SEE"


class Difficulty(str, Enum):
    """Difficulty tier requested for a slot."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class BloomLevel(str, Enum):
    """Bloom's taxonomy level, L1 (remember) to L6 (create)."""
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"
    L5 = "L5"
    L6 = "L6"


class QuestionSource(str, Enum):
    """Where an assigned question came from."""
    FROM_BANK = "processed_data"
    GENERATED = "ai_generated"


class GenerationSource(str, Enum):
    """Overall provenance of a generated paper."""
    PROCESSED_DATA = "processed_data"
    AI_GENERATED = "ai_generated"
    HYBRID = "hybrid"


class ProcessingStatus(str, Enum):
    """Lifecycle of a question bank produced by the processing service."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class QuestionSlot(BaseModel):
    """One required sub-question position in the exam layout."""
    slot_id: str = Field(..., description="Structural id such as '1a' or '7c'")
    difficulty_target: Difficulty = Field(Difficulty.MEDIUM, description="Requested difficulty")
    marks_target: int = Field(..., gt=0, description="Marks for this sub-question")
    included: bool = Field(True, description="Optional parts may be excluded")
    topic_filter: str = Field("", description="Topic the question must cover")

    @field_validator("slot_id", mode="before")
    @classmethod
    def _normalize_slot_id(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("difficulty_target", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("topic_filter", mode="before")
    @classmethod
    def _normalize_topic(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value


class CandidateQuestion(BaseModel):
    """One processed question from the question bank. Read-only."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Union[int, str] = Field(
        ..., validation_alias=AliasChoices("id", "question_id", "_id")
    )
    text: str = Field(..., validation_alias=AliasChoices("text", "question"))
    predicted_marks: int = Field(0, description="Marks predicted by the processor")
    bloom_level: BloomLevel = Field(BloomLevel.L2, description="Bloom level tag")
    difficulty: str = Field("", description="Easy | Medium | Hard (any casing)")
    matched_topic: str = Field("", description="Syllabus topic the question matched")
    matched_unit: str = Field("", description="Syllabus unit, e.g. 'Unit 2'")
    topic_similarity: float = Field(0.0, ge=0.0, le=1.0)


class Topic(BaseModel):
    """Syllabus topic extracted alongside the questions."""
    model_config = ConfigDict(populate_by_name=True)

    unit: str
    topic_id: int
    topic_name: str = Field(..., validation_alias=AliasChoices("topic_name", "topic"))


class QuestionBank(BaseModel):
    """A single snapshot of processed questions and topics for one course."""
    questions: List[CandidateQuestion] = Field(default_factory=list)
    topics: List[Topic] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.questions


class BankSnapshot(BaseModel):
    """A versioned question bank as stored by the processing collaborator."""
    version: int = 1
    status: ProcessingStatus = ProcessingStatus.PENDING
    uploaded_at: Optional[datetime] = None
    bank: QuestionBank = Field(default_factory=QuestionBank)


class AssignedQuestion(BaseModel):
    """The question chosen for one slot."""
    model_config = ConfigDict(frozen=True)

    slot_id: str
    marks: int
    difficulty: Difficulty
    topic_filter: str = ""
    text: str
    bloom_level: BloomLevel
    topic: str = ""
    unit: str = ""
    source: QuestionSource
    similarity: Optional[float] = None
    original_id: Optional[Union[int, str]] = None
    course_outcome: Optional[int] = None


class ExamConfiguration(BaseModel):
    """Exam metadata plus the educator's slot configuration."""
    exam_type: str = Field(..., description="CIE or SEE")
    semester: str
    course_code: str
    course_name: Optional[str] = None
    slots: List[QuestionSlot] = Field(default_factory=list)


class PaperStats(BaseModel):
    total: int = 0
    from_bank: int = 0
    generated: int = 0
    breakdown: Dict[str, int] = Field(default_factory=dict)


class GeneratedPaper(BaseModel):
    """Assembled and rendered question paper."""
    title: str
    exam_type: ExamType
    course: str
    semester: str
    exam_date: Optional[str] = None
    total_marks: int
    generation_source: GenerationSource
    assigned: List[AssignedQuestion]
    rendered_text: str
    stats: PaperStats


class BankStatistics(BaseModel):
    """Summary of a question bank's contents."""
    total_questions: int
    total_topics: int
    difficulty_distribution: Dict[str, int]
    bloom_level_distribution: Dict[str, int]
    marks_distribution: Dict[str, int]
    unit_distribution: Dict[str, int]
    average_similarity: float


# --- API request/response bodies ---

class ValidationResponse(BaseModel):
    valid: bool
    violations: List[Dict[str, Any]] = Field(default_factory=list)


class GeneratePaperRequest(BaseModel):
    config: ExamConfiguration
    question_bank: Optional[QuestionBank] = None
    question_bank_url: Optional[str] = Field(
        None, description="URL of a published question bank JSON snapshot"
    )
    use_question_bank: bool = True
    deterministic_fallback: Optional[bool] = None
    exam_date: Optional[str] = None


class QuestionFilterRequest(BaseModel):
    question_bank: QuestionBank
    difficulty: Optional[str] = None
    bloom_level: Optional[BloomLevel] = None
    unit: Optional[str] = None
    marks: Optional[int] = None
