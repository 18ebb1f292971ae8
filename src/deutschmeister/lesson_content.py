"""Public entry points for lesson assembly.

Learner preferences are always passed in explicitly, either as an
AssemblyOptions instance or as a plain dict such as
``{"purpose": "work", "time_commitment": "10", "learning_style": "speaking"}``.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from deutschmeister import config
from deutschmeister.catalog.graph import get_catalog
from deutschmeister.generators.lesson_builder import build_lesson
from deutschmeister.validators.schema import (
    AssemblyOptions,
    ExerciseKind,
    LessonContent,
    PracticeExercise,
)

logger = logging.getLogger(__name__)

OptionsLike = Union[AssemblyOptions, Dict[str, Any], None]


def as_options(options: OptionsLike) -> AssemblyOptions:
    """Coerce None, a dict or an AssemblyOptions into AssemblyOptions.

    Dict keys may use snake_case or the camelCase names of the profile store.
    """
    if options is None:
        return AssemblyOptions()
    if isinstance(options, AssemblyOptions):
        return options
    renamed = {"timeCommitment": "time_commitment", "learningStyle": "learning_style"}
    return AssemblyOptions(**{renamed.get(k, k): v for k, v in options.items()})


def get_lesson_content(
    lesson_id: str, options: OptionsLike = None
) -> Optional[LessonContent]:
    """Assemble the personalized, budgeted content of one lesson.

    Args:
        lesson_id: Catalog lesson id
        options: Learner purpose, time commitment and learning style

    Returns:
        LessonContent, or None if the lesson id is unknown

    Example:
        >>> content = get_lesson_content("modal-verbs", {"purpose": "work"})
        >>> content.exercises[-1].kind
        'production'
    """
    return build_lesson(lesson_id, as_options(options))


def get_all_practice_exercises(options: OptionsLike = None) -> List[PracticeExercise]:
    """Flatten the non-production exercises of the practice lessons.

    Exercise ids are ``<lesson_id>-ex-<i>`` where ``i`` indexes the lesson's
    exercises after production exercises are removed.
    """
    opts = as_options(options)
    pool: List[PracticeExercise] = []

    for lesson_id in config.PRACTICE_LESSON_IDS:
        content = build_lesson(lesson_id, opts)
        if content is None:
            continue
        practice = [
            ex for ex in content.exercises if ex.kind != ExerciseKind.PRODUCTION.value
        ]
        for i, ex in enumerate(practice):
            pool.append(
                PracticeExercise(
                    id=f"{content.lesson_id}-ex-{i}",
                    lesson_id=content.lesson_id,
                    lesson_title=content.title,
                    kind=ex.kind,
                    prompt=ex.prompt,
                    answer=ex.answer,
                    options=getattr(ex, "options", None),
                    words=getattr(ex, "words", None),
                    pairs=getattr(ex, "pairs", None),
                    explanation=ex.explanation,
                )
            )

    logger.debug(f"Practice pool has {len(pool)} exercises")
    return pool


def get_lesson_names(options: OptionsLike = None) -> List[Dict[str, str]]:
    """Resolve every catalog lesson id to its personalized display title.

    The title falls back to the lesson id when no content can be assembled.
    """
    opts = as_options(options)
    names = []
    for lesson in get_catalog():
        content = build_lesson(lesson.id, opts)
        names.append({"id": lesson.id, "title": content.title if content else lesson.id})
    return names
