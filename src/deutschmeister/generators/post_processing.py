"""Purpose-specific post-processing of budgeted lessons."""

import logging

from deutschmeister import config
from deutschmeister.validators.schema import LessonContent, PurposeTrack

logger = logging.getLogger(__name__)


def ensure_exam_timing(content: LessonContent) -> LessonContent:
    """Mark the first exercise of an exam lesson as timed.

    Only applies to the 'exams' purpose track. Content that has no exercises,
    or where any exercise prompt already mentions "timed" (case-insensitive),
    is returned unchanged. Otherwise the first exercise prompt is prefixed with
    ``"Timed (45s): "``; exercise count and kinds are preserved.

    Args:
        content: Budgeted lesson content

    Returns:
        The same content, or a copy with the first prompt rewritten
    """
    if content.purpose_track != PurposeTrack.EXAMS or not content.exercises:
        return content

    if any("timed" in ex.prompt.lower() for ex in content.exercises):
        return content

    first, *rest = content.exercises
    timed = first.model_copy(update={"prompt": config.EXAM_TIMING_PREFIX + first.prompt})
    logger.debug(f"Added exam timing to first exercise of {content.lesson_id}")
    return content.model_copy(update={"exercises": [timed, *rest]})
