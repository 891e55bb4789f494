"""
Configuration Module for Paper Generation
Centralizes environment settings, matching tolerances and fallback templates.
"""
import os
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# --- Matching Configuration ---
CIE_MARKS_TOLERANCE = 2
SEE_MARKS_TOLERANCE = 3
FILTER_MARKS_TOLERANCE = 1

# Score weights used when ranking bank candidates for a slot
SIMILARITY_WEIGHT = 100
EXACT_MARKS_BONUS = 50
UNIT_MATCH_BONUS = 25

# --- Fallback Content ---
DEFAULT_TOPICS: Tuple[str, ...] = (
    "process management",
    "memory management",
    "file systems",
    "I/O systems",
    "CPU scheduling",
    "deadlock handling",
    "virtual memory",
    "disk scheduling",
    "operating system security",
    "distributed systems",
    "system calls",
    "threading",
)

FALLBACK_TEMPLATES: Dict[str, List[str]] = {
    "easy": [
        "Define and explain {topic} with suitable examples.",
        "List the key characteristics and features of {topic}.",
        "What are the basic components of {topic}? Explain briefly.",
        "Draw a simple diagram to illustrate {topic}.",
    ],
    "medium": [
        "Explain the working principle of {topic} with detailed examples and applications.",
        "Analyze the advantages and disadvantages of {topic}.",
        "Describe the implementation process of {topic} with algorithmic steps.",
        "Compare and contrast different approaches to {topic}.",
    ],
    "hard": [
        "Design and implement a comprehensive solution for {topic} addressing complex scenarios.",
        "Critically evaluate the performance implications of {topic} in modern systems.",
        "Develop an optimized algorithm for {topic} and justify your design decisions.",
        "Create a novel approach for {topic} to solve real-world system challenges.",
    ],
}

COURSE_NAMES: Dict[str, str] = {
    "ML": "Machine Learning",
    "ACN": "Advanced Computer Networks",
    "DCN": "Data Communication Networks",
    "DL": "Deep Learning",
    "DS": "Data Structures",
    "DBMS": "Database Management Systems",
    "AI": "Artificial Intelligence",
    "OS": "Operating Systems",
    "CI201": "Data Structures and Algorithms",
    "CI301": "Database Management Systems",
    "CI401": "Artificial Intelligence",
    "CI402": "Operating System",
    "CI501": "Advanced Computer Networks",
    "MATH201": "Linear Algebra",
    "ECE201": "Digital Electronics",
}


class GenerationSettings(BaseModel):
    """Knobs that change how a paper is assembled."""
    deterministic_fallback: bool = Field(
        False, description="Pick fallback templates by a positional key instead of randomly"
    )
    cie_marks_tolerance: int = Field(CIE_MARKS_TOLERANCE, ge=0)
    see_marks_tolerance: int = Field(SEE_MARKS_TOLERANCE, ge=0)
    filter_marks_tolerance: int = Field(FILTER_MARKS_TOLERANCE, ge=0)
    allow_repeats: bool = Field(
        True, description="Allow one bank question to fill several slots in a paper"
    )
    random_seed: Optional[int] = None
    default_topics: Tuple[str, ...] = Field(DEFAULT_TOPICS, min_length=1)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean, got '{raw}'")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


def get_settings() -> GenerationSettings:
    """
    Builds generation settings from the environment.

    Returns:
        GenerationSettings with environment overrides applied.

    Raises:
        ValueError: If an environment variable holds an invalid value.
    """
    # Load environment variables fresh (for testing and reload scenarios)
    load_dotenv()

    topics = DEFAULT_TOPICS
    raw_topics = os.getenv("PAPERGEN_DEFAULT_TOPICS")
    if raw_topics:
        topics = tuple(t.strip() for t in raw_topics.split(",") if t.strip()) or DEFAULT_TOPICS

    return GenerationSettings(
        deterministic_fallback=_env_bool("PAPERGEN_DETERMINISTIC_FALLBACK", False),
        cie_marks_tolerance=_env_int("PAPERGEN_CIE_MARKS_TOLERANCE", CIE_MARKS_TOLERANCE),
        see_marks_tolerance=_env_int("PAPERGEN_SEE_MARKS_TOLERANCE", SEE_MARKS_TOLERANCE),
        filter_marks_tolerance=_env_int("PAPERGEN_FILTER_MARKS_TOLERANCE", FILTER_MARKS_TOLERANCE),
        allow_repeats=_env_bool("PAPERGEN_ALLOW_REPEATS", True),
        random_seed=_env_int("PAPERGEN_RANDOM_SEED", None),
        default_topics=topics,
    )


def get_fallback_templates(difficulty: str) -> List[str]:
    """
    Retrieves the phrasing templates for a difficulty tier.

    Args:
        difficulty: Difficulty tier ("easy", "medium" or "hard").

    Returns:
        List of templates, each containing a {topic} placeholder.

    Raises:
        KeyError: If the tier has no templates.
    """
    if difficulty not in FALLBACK_TEMPLATES:
        raise KeyError(f"Fallback templates for '{difficulty}' not found.")

    return FALLBACK_TEMPLATES[difficulty]


def get_course_name(course_code: str) -> str:
    """Expand a known course code; unknown codes are returned unchanged."""
    return COURSE_NAMES.get(course_code.strip().upper(), course_code)
