"""Purpose flavor table and template interpolation.

Parameterized lessons author their purpose-specific context once, with
``{slot}`` placeholders. Each purpose track supplies the slot values (names,
places, recurring nouns, task prefix) and an optional flavor vocabulary list.
"""

import logging
from functools import lru_cache
from pathlib import Path
from string import Formatter
from typing import Dict, Optional, Set, Union

from pydantic import ValidationError

from deutschmeister import config
from deutschmeister.exceptions import LessonDataError
from deutschmeister.utils.file_io import read_json
from deutschmeister.validators.schema import (
    DialogueLine,
    LessonContext,
    ProductionPrompt,
    PurposeFlavor,
    PurposeTrack,
    VocabItem,
)

logger = logging.getLogger(__name__)

_FORMATTER = Formatter()


def load_purpose_flavors(
    path: Optional[Union[str, Path]] = None,
) -> Dict[str, PurposeFlavor]:
    """Load the purpose flavor table.

    Args:
        path: Flavor JSON file (default: ``<DATA_DIR>/purpose_flavors.json``)

    Returns:
        Mapping of purpose track value to its flavor

    Raises:
        LessonDataError: If the file is missing or malformed, or a purpose
            track has no flavor entry
    """
    path = Path(path) if path else config.DATA_DIR / config.PURPOSE_FLAVORS_FILE

    try:
        raw = read_json(path)
    except (FileNotFoundError, ValueError) as e:
        raise LessonDataError(f"Cannot read purpose flavors from {path}: {e}") from e

    if not isinstance(raw, dict):
        raise LessonDataError(f"Purpose flavors must be a JSON object: {path}")

    missing = sorted(track.value for track in PurposeTrack if track.value not in raw)
    if missing:
        raise LessonDataError(f"Purpose flavors missing tracks {missing}: {path}")

    flavors = {}
    for track in PurposeTrack:
        try:
            flavors[track.value] = PurposeFlavor.model_validate(raw[track.value])
        except ValidationError as e:
            raise LessonDataError(
                f"Invalid purpose flavor '{track.value}' in {path}: {e}"
            ) from e

    logger.debug(f"Loaded {len(flavors)} purpose flavors from {path}")
    return flavors


@lru_cache(maxsize=1)
def get_purpose_flavors() -> Dict[str, PurposeFlavor]:
    """Return the bundled purpose flavor table, loaded once per process."""
    return load_purpose_flavors()


def template_slots(text: str) -> Set[str]:
    """Names of the ``{slot}`` placeholders used in ``text``."""
    try:
        return {name for _, name, _, _ in _FORMATTER.parse(text) if name}
    except ValueError as e:
        raise LessonDataError(f"Malformed template {text!r}: {e}") from e


def render_text(text: str, slots: Dict[str, str]) -> str:
    """Interpolate ``{slot}`` placeholders.

    Raises:
        LessonDataError: If the text uses a slot that is not defined
    """
    unknown = template_slots(text) - set(slots)
    if unknown:
        raise LessonDataError(f"Unknown template slots {sorted(unknown)} in: {text!r}")
    return text.format_map(slots)


def render_context(
    template: LessonContext,
    flavor: PurposeFlavor,
    include_flavor_vocabulary: bool = False,
) -> LessonContext:
    """Render a lesson context template for one purpose flavor.

    Args:
        template: Context whose strings may contain ``{slot}`` placeholders
        flavor: Purpose flavor supplying the slot values
        include_flavor_vocabulary: Append the flavor's vocabulary list,
            skipping words the template already teaches

    Returns:
        A new, fully interpolated LessonContext
    """
    slots = flavor.slots()

    def render(text: Optional[str]) -> Optional[str]:
        return None if text is None else render_text(text, slots)

    vocabulary = [
        VocabItem(
            german=render(item.german),
            english=render(item.english),
            example=render(item.example),
        )
        for item in template.vocabulary
    ]
    if include_flavor_vocabulary:
        taught = {item.german for item in vocabulary}
        vocabulary.extend(item for item in flavor.vocabulary if item.german not in taught)

    return LessonContext(
        title=render(template.title),
        ability_objective=render(template.ability_objective),
        vocabulary=vocabulary,
        dialogue=[
            DialogueLine(
                speaker=render(line.speaker),
                german=render(line.german),
                english=render(line.english),
            )
            for line in template.dialogue
        ],
        production=ProductionPrompt(
            prompt=render(template.production.prompt),
            sample_answer=render(template.production.sample_answer),
        ),
        skill_unlock=render(template.skill_unlock),
        review_suggestion=render(template.review_suggestion),
    )
