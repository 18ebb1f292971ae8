"""Time-budget and learning-style trimming of assembled lessons.

Applied to every builder's output, in this order: dialogue, exercises,
vocabulary. Short sessions keep the exercise kind that matches the learner's
style: speaking learners lose reorder drills, everyone else loses the free
production task.
"""

from typing import List, Optional

from deutschmeister import config
from deutschmeister.validators.schema import (
    CEFRLabel,
    ExerciseKind,
    LessonContent,
    VocabItem,
)

_BASIC_LEVELS = {CEFRLabel.A1, CEFRLabel.A2}


def is_short_session(time_commitment: Optional[str]) -> bool:
    """True for the 5 and 10 minute tiers."""
    return time_commitment in config.SHORT_SESSION_TIERS


def limit_vocabulary(
    vocabulary: List[VocabItem], level: CEFRLabel, short: bool
) -> List[VocabItem]:
    if short:
        return vocabulary[: config.SHORT_VOCAB_LIMIT]
    if level in _BASIC_LEVELS:
        return vocabulary[: config.BASIC_VOCAB_LIMIT]
    return vocabulary[: config.ADVANCED_VOCAB_LIMIT]


def apply_budget(
    content: LessonContent, short: bool, speaking_priority: bool
) -> LessonContent:
    """Trim dialogue, exercises and vocabulary to the session budget.

    Args:
        content: Unbudgeted lesson content
        short: Whether the learner chose a 5 or 10 minute session
        speaking_priority: Whether the learner's style is 'speaking'

    Returns:
        A new LessonContent; the input is left untouched
    """
    dialogue = list(content.dialogue)
    if short:
        dialogue = dialogue[: config.SHORT_DIALOGUE_LINES]

    exercises = list(content.exercises)
    if short:
        dropped = ExerciseKind.REORDER if speaking_priority else ExerciseKind.PRODUCTION
        exercises = [ex for ex in exercises if ex.kind != dropped.value]
        exercises = exercises[: config.SHORT_EXERCISE_LIMIT]

    return content.model_copy(
        update={
            "dialogue": dialogue,
            "exercises": exercises,
            "vocabulary": limit_vocabulary(
                list(content.vocabulary), content.level, short
            ),
        }
    )
