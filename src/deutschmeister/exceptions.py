"""Exceptions raised while loading lesson data.

Assembly itself never raises for unknown lesson ids; these errors signal
authoring faults in the static catalog and lesson definition files.
"""


class LessonEngineError(Exception):
    """Base class for lesson engine errors."""


class CatalogError(LessonEngineError):
    """Catalog data is malformed or violates the prerequisite graph rules."""


class LessonDataError(LessonEngineError):
    """A lesson definition or purpose flavor file is malformed."""
