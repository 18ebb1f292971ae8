"""
DeutschMeister lesson engine

Assembles personalized German lessons from a fixed catalog of ability-based
lesson templates and validates the assembled content across every
lesson, purpose track and learning style.

**Version**: 0.1.0
**Python**: >=3.11
**Key Dependencies**: pydantic, python-dotenv, tqdm
"""

__version__ = "0.1.0"

from deutschmeister.catalog.graph import (
    build_personalized_catalog,
    get_catalog,
    get_current_lesson,
    is_lesson_unlocked,
    normalize_purpose,
)
from deutschmeister.lesson_content import (
    get_all_practice_exercises,
    get_lesson_content,
    get_lesson_names,
)
from deutschmeister.utils.text_normalization import normalize_answer
from deutschmeister.validators.schema import (
    AssemblyOptions,
    LearnerProfile,
    LessonCatalogItem,
    LessonContent,
    PracticeExercise,
    PurposeTrack,
)

__all__ = [
    "__version__",
    "AssemblyOptions",
    "LearnerProfile",
    "LessonCatalogItem",
    "LessonContent",
    "PracticeExercise",
    "PurposeTrack",
    "build_personalized_catalog",
    "get_all_practice_exercises",
    "get_catalog",
    "get_current_lesson",
    "get_lesson_content",
    "get_lesson_names",
    "is_lesson_unlocked",
    "normalize_answer",
    "normalize_purpose",
]
