"""Lesson catalog graph: prerequisite edges, ordering and unlock queries."""

from deutschmeister.catalog.graph import (
    build_personalized_catalog,
    get_catalog,
    get_current_lesson,
    is_lesson_unlocked,
    load_catalog,
    topological_order,
)

__all__ = [
    "build_personalized_catalog",
    "get_catalog",
    "get_current_lesson",
    "is_lesson_unlocked",
    "load_catalog",
    "topological_order",
]
