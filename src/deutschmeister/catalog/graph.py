"""Lesson catalog graph: loading, integrity checks and unlock queries.

The catalog is a static, ordered list of lessons linked by prerequisite ids.
Declaration order doubles as the learning order, so load_catalog() verifies
that it is a topological order of the prerequisite relation and refuses to
return a catalog that violates it.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Collection, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from deutschmeister import config
from deutschmeister.exceptions import CatalogError
from deutschmeister.utils.file_io import read_json
from deutschmeister.validators.schema import LessonCatalogItem, PurposeTrack

logger = logging.getLogger(__name__)

_VALID_TRACKS = {track.value for track in PurposeTrack}


def normalize_purpose(purpose: Optional[str]) -> str:
    """Map a learner purpose to a purpose track.

    Absent, 'other' and unrecognized purposes fall back to 'daily'.

    Example:
        >>> normalize_purpose("other")
        'daily'
    """
    if isinstance(purpose, PurposeTrack):
        return purpose.value
    if purpose in _VALID_TRACKS:
        return purpose
    return config.DEFAULT_PURPOSE_TRACK


# ============================================================================
# Loading
# ============================================================================


def load_catalog(path: Optional[Union[str, Path]] = None) -> List[LessonCatalogItem]:
    """Load and verify the lesson catalog.

    Args:
        path: Catalog JSON file (default: ``<DATA_DIR>/catalog.json``)

    Returns:
        Catalog entries in declaration order

    Raises:
        CatalogError: If the file is malformed, an id is duplicated, a
            prerequisite is unknown, the prerequisites form a cycle, or the
            declaration order lists a lesson before one of its prerequisites
    """
    path = Path(path) if path else config.DATA_DIR / config.CATALOG_FILE

    try:
        raw = read_json(path)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except ValueError as e:
        raise CatalogError(f"Catalog file is not valid JSON: {path}: {e}") from e

    if not isinstance(raw, list):
        raise CatalogError(f"Catalog must be a JSON list of lessons: {path}")

    try:
        catalog = [LessonCatalogItem.model_validate(entry) for entry in raw]
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog entry in {path}: {e}") from e

    verify_catalog(catalog)
    logger.debug(f"Loaded {len(catalog)} lessons from {path}")
    return catalog


def verify_catalog(catalog: List[LessonCatalogItem]) -> None:
    """Check id uniqueness, prerequisite resolution, acyclicity and order.

    Raises:
        CatalogError: On the first violated rule
    """
    seen = set()
    for lesson in catalog:
        if lesson.id in seen:
            raise CatalogError(f"Duplicate lesson id: {lesson.id}")
        seen.add(lesson.id)

    for lesson in catalog:
        unknown = [pid for pid in lesson.prerequisite_ids if pid not in seen]
        if unknown:
            raise CatalogError(
                f"Lesson '{lesson.id}' has unknown prerequisites: {unknown}"
            )

    cycle = find_cycle(catalog)
    if cycle:
        raise CatalogError(f"Prerequisite cycle: {' -> '.join(cycle)}")

    position = {lesson.id: index for index, lesson in enumerate(catalog)}
    for lesson in catalog:
        for pid in lesson.prerequisite_ids:
            if position[pid] > position[lesson.id]:
                raise CatalogError(
                    f"Lesson '{lesson.id}' is declared before its prerequisite '{pid}'"
                )


@lru_cache(maxsize=1)
def get_catalog() -> Tuple[LessonCatalogItem, ...]:
    """Return the bundled catalog, loaded once per process."""
    return tuple(load_catalog())


def get_catalog_item(lesson_id: str) -> Optional[LessonCatalogItem]:
    """Look up a catalog entry by id; None if unknown."""
    for lesson in get_catalog():
        if lesson.id == lesson_id:
            return lesson
    return None


# ============================================================================
# Graph queries
# ============================================================================


def find_cycle(catalog: Collection[LessonCatalogItem]) -> Optional[List[str]]:
    """Find a prerequisite cycle.

    Prerequisite ids that are not in the catalog are ignored.

    Returns:
        The cycle as a list of ids whose first and last element are equal,
        or None when the prerequisite relation is acyclic
    """
    edges: Dict[str, List[str]] = {
        lesson.id: list(lesson.prerequisite_ids) for lesson in catalog
    }
    state: Dict[str, int] = {}  # 1 = on stack, 2 = done
    stack: List[str] = []

    def visit(node: str) -> Optional[List[str]]:
        state[node] = 1
        stack.append(node)
        for nxt in edges.get(node, []):
            if nxt not in edges:
                continue
            if state.get(nxt) == 1:
                return stack[stack.index(nxt):] + [nxt]
            if nxt not in state:
                found = visit(nxt)
                if found:
                    return found
        stack.pop()
        state[node] = 2
        return None

    for lesson_id in edges:
        if lesson_id not in state:
            found = visit(lesson_id)
            if found:
                return found
    return None


def topological_order(catalog: Collection[LessonCatalogItem]) -> List[str]:
    """Order lesson ids so that every prerequisite precedes its dependents.

    Ties are broken by declaration order, so a catalog whose declaration order
    is already topological comes back unchanged.

    Raises:
        CatalogError: If the prerequisite relation has a cycle
    """
    ids = [lesson.id for lesson in catalog]
    known = set(ids)
    remaining = {
        lesson.id: {pid for pid in lesson.prerequisite_ids if pid in known}
        for lesson in catalog
    }
    ordered: List[str] = []
    done = set()

    while len(ordered) < len(ids):
        ready = next(
            (i for i in ids if i not in done and remaining[i] <= done), None
        )
        if ready is None:
            cycle = find_cycle(catalog) or []
            raise CatalogError(f"Prerequisite cycle: {' -> '.join(cycle)}")
        ordered.append(ready)
        done.add(ready)

    return ordered


def applicable_purposes(lesson: LessonCatalogItem) -> List[str]:
    """Purpose tracks this lesson is offered on, in canonical track order."""
    return [track.value for track in PurposeTrack if lesson.applies_to(track.value)]


def is_lesson_unlocked(lesson: LessonCatalogItem, completed: Collection[str]) -> bool:
    """True iff every prerequisite of ``lesson`` is in ``completed``."""
    return all(pid in completed for pid in lesson.prerequisite_ids)


def get_current_lesson(
    catalog: Collection[LessonCatalogItem], completed: Collection[str]
) -> Optional[LessonCatalogItem]:
    """First lesson in declaration order that is not completed and is unlocked."""
    for lesson in catalog:
        if lesson.id not in completed and is_lesson_unlocked(lesson, completed):
            return lesson
    return None


def build_personalized_catalog(
    purpose: Optional[str], catalog: Optional[Collection[LessonCatalogItem]] = None
) -> List[LessonCatalogItem]:
    """Filter the catalog to lessons offered on the learner's purpose track.

    Args:
        purpose: Learner purpose; normalized with normalize_purpose()
        catalog: Catalog to filter (default: the bundled catalog)

    Returns:
        Matching lessons in declaration order
    """
    track = normalize_purpose(purpose)
    source = get_catalog() if catalog is None else catalog
    return [lesson for lesson in source if lesson.applies_to(track)]
