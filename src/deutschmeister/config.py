"""Runtime configuration and domain constants.

Environment variables are read once at import time, after loading an optional
``.env`` file (``ENV_FILE`` selects a different file).

Environment:
    DEUTSCHMEISTER_DATA_DIR: Directory holding catalog.json, purpose_flavors.json
        and lessons/*.json (default: the bundled ``data`` directory)
    LOG_LEVEL: Default log level for the CLI (default: INFO)
    LOG_FORMAT: "json" switches CLI logging to structured JSON records
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(os.getenv("ENV_FILE"))

# General
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

BASE_PATH = Path(__file__).resolve().parent
DATA_DIR = Path(os.getenv("DEUTSCHMEISTER_DATA_DIR") or BASE_PATH / "data")

CATALOG_FILE = "catalog.json"
PURPOSE_FLAVORS_FILE = "purpose_flavors.json"
LESSONS_SUBDIR = "lessons"

# Assembly
DEFAULT_PURPOSE_TRACK = "daily"
SHORT_SESSION_TIERS = frozenset({"5", "10"})
SHORT_DIALOGUE_LINES = 2
SHORT_EXERCISE_LIMIT = 3
SHORT_VOCAB_LIMIT = 6
BASIC_VOCAB_LIMIT = 12  # A1/A2
ADVANCED_VOCAB_LIMIT = 15  # B1 and above

EXAM_TIMING_PREFIX = "Timed (45s): "
GRAMMAR_SNAPSHOT_MARKER = "Grammar snapshot"

# Lessons pooled for practice mode
PRACTICE_LESSON_IDS = (
    "greetings-intro",
    "numbers-time",
    "personal-pronouns",
    "articles-gender",
    "present-tense",
    "everyday-phrases",
    "negation",
    "question-words",
)

# Validation runs
STRUCTURAL_TIME_COMMITMENT = "20"
RULES_TIME_COMMITMENT = "10"
VALIDATED_LEARNING_STYLES = ("balanced", "speaking", "grammar")
