"""Lesson builders: one per catalog lesson, assembled from definition files.

Each lesson definition under ``data/lessons`` carries either a literal
context per purpose track (authored lessons) or a single context template
interpolated with the purpose flavor table (parameterized lessons). The
registry turns every catalog entry plus its definition into a builder
function ``options -> LessonContent``; builders are pure and never raise for
valid input.

Pipeline per call:
    builder (context, grammar, exercises) -> apply_budget -> ensure_exam_timing
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from deutschmeister import config
from deutschmeister.catalog.graph import get_catalog, normalize_purpose
from deutschmeister.exceptions import LessonDataError
from deutschmeister.generators.budget import apply_budget, is_short_session
from deutschmeister.generators.post_processing import ensure_exam_timing
from deutschmeister.templates.purpose_flavors import (
    get_purpose_flavors,
    render_context,
)
from deutschmeister.utils.file_io import list_files, read_json
from deutschmeister.validators.schema import (
    AssemblyOptions,
    CEFRLabel,
    CEFRLevel,
    GrammarPoint,
    LessonCatalogItem,
    LessonContent,
    LessonContext,
    LearningStyle,
    LessonDefinition,
    ProductionExercise,
    ProductionMode,
    ProductionSlot,
    PurposeFlavor,
    PurposeTrack,
)

logger = logging.getLogger(__name__)

LessonBuilder = Callable[[AssemblyOptions], LessonContent]


# ============================================================================
# Definition loading
# ============================================================================


def load_lesson_definition(file_path: Union[str, Path]) -> LessonDefinition:
    """Load and schema-validate one lesson definition file.

    Raises:
        LessonDataError: If the file cannot be read, fails validation, or its
            lesson_id does not match the file name
    """
    file_path = Path(file_path)
    try:
        definition = LessonDefinition.model_validate(read_json(file_path))
    except (FileNotFoundError, ValueError) as e:
        # pydantic's ValidationError is a ValueError subclass
        raise LessonDataError(f"Invalid lesson definition {file_path}: {e}") from e

    if definition.lesson_id != file_path.stem:
        raise LessonDataError(
            f"Lesson definition {file_path} declares lesson_id "
            f"'{definition.lesson_id}'"
        )
    return definition


def load_lesson_definitions(
    directory: Optional[Union[str, Path]] = None,
) -> Dict[str, LessonDefinition]:
    """Load every ``*.json`` lesson definition in a directory.

    Args:
        directory: Definition directory (default: ``<DATA_DIR>/lessons``)

    Returns:
        Mapping of lesson id to definition
    """
    if directory is None:
        directory = config.DATA_DIR / config.LESSONS_SUBDIR
    directory = Path(directory)
    definitions = {}
    for file_path in list_files(directory, "*.json"):
        definition = load_lesson_definition(file_path)
        definitions[definition.lesson_id] = definition

    logger.debug(f"Loaded {len(definitions)} lesson definitions from {directory}")
    return definitions


# ============================================================================
# Builder helpers
# ============================================================================


def to_level_label(cefr: Union[CEFRLevel, str, None]) -> CEFRLabel:
    """Display label for a catalog CEFR level; unknown levels map to A1."""
    value = cefr.value if isinstance(cefr, CEFRLevel) else str(cefr or "")
    try:
        return CEFRLabel(value.upper())
    except ValueError:
        return CEFRLabel.A1


def apply_grammar_clarity(
    points: Sequence[GrammarPoint],
    learning_style: Optional[str],
    snapshot: Optional[GrammarPoint],
) -> List[GrammarPoint]:
    """Append the grammar snapshot for grammar-focused learners only."""
    if learning_style != LearningStyle.GRAMMAR or snapshot is None:
        return list(points)
    return [*points, snapshot]


def resolve_contexts(
    definition: LessonDefinition, flavors: Dict[str, PurposeFlavor]
) -> Dict[str, LessonContext]:
    """Purpose-specific contexts of a lesson for every purpose track.

    Templates are rendered eagerly, so a template that uses an unknown slot
    fails here rather than during assembly.
    """
    if definition.contexts is not None:
        return {track.value: ctx for track, ctx in definition.contexts.items()}

    try:
        return {
            track.value: render_context(
                definition.context_template,
                flavors[track.value],
                include_flavor_vocabulary=definition.include_flavor_vocabulary,
            )
            for track in PurposeTrack
        }
    except (LessonDataError, ValidationError) as e:
        raise LessonDataError(
            f"Cannot render context template of '{definition.lesson_id}': {e}"
        ) from e


def make_builder(
    item: LessonCatalogItem,
    definition: LessonDefinition,
    flavors: Dict[str, PurposeFlavor],
) -> LessonBuilder:
    """Create the builder function for one catalog lesson."""
    contexts = resolve_contexts(definition, flavors)
    level = to_level_label(item.cefr)

    def build(options: AssemblyOptions) -> LessonContent:
        purpose_track = normalize_purpose(options.purpose)
        short = is_short_session(options.time_commitment)
        speaking_priority = options.learning_style == LearningStyle.SPEAKING
        context = contexts[purpose_track]

        mode = ProductionMode.SPEAKING if speaking_priority else ProductionMode.WRITING
        exercises = []
        for exercise in definition.exercises:
            if isinstance(exercise, ProductionSlot):
                exercises.append(
                    ProductionExercise(
                        prompt=context.production.prompt,
                        answer="",
                        sample_answer=context.production.sample_answer,
                        mode=mode,
                        explanation=exercise.explanation,
                    )
                )
            else:
                exercises.append(exercise)

        content = LessonContent(
            lesson_id=item.id,
            title=context.title,
            level=level,
            purpose_track=purpose_track,
            prerequisites=list(item.prerequisite_ids),
            ability_objective=context.ability_objective,
            grammar_focus=item.grammar_focus,
            grammar_points=apply_grammar_clarity(
                definition.grammar_points,
                options.learning_style,
                definition.grammar_snapshot,
            ),
            vocabulary=list(context.vocabulary),
            dialogue=list(context.dialogue),
            exercises=exercises,
            skill_unlock=context.skill_unlock,
            review_suggestion=context.review_suggestion,
            goal=context.ability_objective,
            review_hint=context.review_suggestion,
        )
        return apply_budget(content, short, speaking_priority)

    build.__name__ = f"build_{item.id.replace('-', '_')}"
    return build


# ============================================================================
# Registry and dispatch
# ============================================================================


def build_registry(
    catalog: Optional[Sequence[LessonCatalogItem]] = None,
    definitions: Optional[Dict[str, LessonDefinition]] = None,
    flavors: Optional[Dict[str, PurposeFlavor]] = None,
) -> Dict[str, LessonBuilder]:
    """Map every catalog lesson id to its builder.

    Args:
        catalog: Catalog entries (default: bundled catalog)
        definitions: Lesson definitions by id (default: bundled definitions)
        flavors: Purpose flavor table (default: bundled flavors)

    Returns:
        Builder registry in catalog order

    Raises:
        LessonDataError: If a catalog lesson has no definition or a template
            cannot be rendered
    """
    catalog = get_catalog() if catalog is None else catalog
    definitions = load_lesson_definitions() if definitions is None else definitions
    flavors = get_purpose_flavors() if flavors is None else flavors

    missing = [item.id for item in catalog if item.id not in definitions]
    if missing:
        raise LessonDataError(f"Catalog lessons without a definition: {missing}")

    catalog_ids = {item.id for item in catalog}
    orphans = sorted(set(definitions) - catalog_ids)
    if orphans:
        logger.warning(f"Ignoring lesson definitions not in the catalog: {orphans}")

    registry = {
        item.id: make_builder(item, definitions[item.id], flavors) for item in catalog
    }
    logger.debug(f"Built {len(registry)} lesson builders")
    return registry


@lru_cache(maxsize=1)
def get_builder_registry() -> Dict[str, LessonBuilder]:
    """Return the registry for the bundled data, built once per process."""
    return build_registry()


def build_lesson(
    lesson_id: str,
    options: Optional[AssemblyOptions] = None,
    registry: Optional[Dict[str, LessonBuilder]] = None,
) -> Optional[LessonContent]:
    """Assemble a lesson: builder, budget transform, exam timing.

    Returns:
        The final LessonContent, or None for an unknown lesson id
    """
    registry = get_builder_registry() if registry is None else registry
    builder = registry.get(lesson_id)
    if builder is None:
        logger.debug(f"No builder for lesson id: {lesson_id}")
        return None
    return ensure_exam_timing(builder(options or AssemblyOptions()))
