"""
Error Types for Paper Generation
Structured failures raised by the validator and assembler.
"""
from typing import Any, Dict, List


class PaperGenError(Exception):
    """Base class for all paper generation errors."""

    code = "paper_generation_error"

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.code, "message": str(self)}


class SlotValidationError(PaperGenError):
    """A slot configuration violates a generation precondition."""

    code = "invalid_configuration"


class InvalidMarksTotalError(SlotValidationError):
    """Included marks of one section/question do not add up to the target."""

    code = "invalid_marks_total"

    def __init__(self, exam_type: str, group: str, actual: int, expected: int):
        self.exam_type = exam_type
        self.group = group
        self.actual = actual
        self.expected = expected
        label = "Section" if exam_type == "CIE" else "Question"
        super().__init__(
            f"{label} {group} must have a total of {expected} marks. "
            f"Current total: {actual}"
        )

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail.update(group=self.group, actual=self.actual, expected=self.expected)
        return detail


class MissingTopicError(SlotValidationError):
    """One or more included slots have no topic selected."""

    code = "missing_topic"

    def __init__(self, slot_ids: List[str]):
        self.slot_ids = list(slot_ids)
        super().__init__(
            "Please select a topic for each active question: " + ", ".join(self.slot_ids)
        )

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["slot_ids"] = self.slot_ids
        return detail


class UnknownExamTypeError(PaperGenError, ValueError):
    """Exam type is neither CIE nor SEE."""

    code = "unknown_exam_type"

    def __init__(self, exam_type: Any):
        self.exam_type = exam_type
        super().__init__(f"Unknown exam type '{exam_type}'. Allowed: CIE, SEE")

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["exam_type"] = str(self.exam_type)
        return detail


class MalformedSlotError(PaperGenError, ValueError):
    """Slot id does not fit the structure of the exam layout."""

    code = "malformed_slot"

    def __init__(self, slot_id: str, reason: str):
        self.slot_id = slot_id
        self.reason = reason
        super().__init__(f"Malformed slot '{slot_id}': {reason}")

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["slot_id"] = self.slot_id
        return detail
