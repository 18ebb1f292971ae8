"""Cross-product validation of assembled lesson content.

Runs the assembly pipeline over every catalog lesson and applicable purpose
track and checks the structural and pedagogical rules of the resulting
records:

- Structural pass (time "20", style "balanced"): titles, exercises, answers,
  options, reorder words, production tasks.
- Rules pass (time "10", every validated style): speaking learners get a
  speaking task, grammar learners get the grammar snapshot, exam learners get
  a timed prompt.
- Catalog pass: prerequisites that are never offered on a purpose track.

Errors fail the run; warnings are advisory.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from deutschmeister import config
from deutschmeister.catalog.graph import applicable_purposes, get_catalog
from deutschmeister.generators.lesson_builder import build_lesson
from deutschmeister.utils.logging_config import pipeline_stage_logger
from deutschmeister.utils.text_normalization import normalize_punctuation
from deutschmeister.validators.schema import (
    AssemblyOptions,
    ExerciseKind,
    LessonCatalogItem,
    LessonContent,
    ProductionMode,
    Severity,
    ValidationFinding,
    ValidationReport,
)

logger = logging.getLogger(__name__)

ContentProvider = Callable[[str, AssemblyOptions], Optional[LessonContent]]

ABILITY_VERBS = (
    "introduce", "describe", "handle", "ask", "talk", "express", "use", "name",
    "write", "read", "order", "compare", "present", "contribute", "navigate",
    "shop", "make", "build", "tell", "report", "understand", "plan", "get",
    "say", "learn", "discuss", "register", "master", "explain",
)

GRAMMAR_KEYWORDS = (
    "case", "tense", "pronoun", "pronouns", "article", "articles", "preposition",
    "prepositions", "passive", "konjunktiv", "genitive", "dative", "accusative",
)

_CHOICE_KINDS = (ExerciseKind.MULTIPLE_CHOICE.value, ExerciseKind.FILL_BLANK.value)
_PRODUCTION_MODES = tuple(mode.value for mode in ProductionMode)


def has_ability_verb(title: str) -> bool:
    lower = title.lower()
    return any(verb in lower for verb in ABILITY_VERBS)


def is_grammar_labeled(title: str) -> bool:
    """True if a title names a grammar topic instead of an ability.

    A title is grammar-labeled when it mentions a grammar keyword and no
    ability verb (substring match, case-insensitive).

    Example:
        >>> is_grammar_labeled("Dative case")
        True
        >>> is_grammar_labeled("Talk about giving things to people")
        False
    """
    lower = title.lower()
    has_keyword = any(keyword in lower for keyword in GRAMMAR_KEYWORDS)
    return has_keyword and not has_ability_verb(title)


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _error(location: str, message: str) -> ValidationFinding:
    return ValidationFinding(severity=Severity.ERROR, location=location, message=message)


def _warning(location: str, message: str) -> ValidationFinding:
    return ValidationFinding(
        severity=Severity.WARNING, location=location, message=message
    )


# ============================================================================
# Individual checks
# ============================================================================


def check_catalog_entry(
    lesson: LessonCatalogItem, known_ids: Optional[Sequence[str]] = None
) -> List[ValidationFinding]:
    """Check a catalog entry's title and prerequisite references."""
    key = f"[catalog] {lesson.id}"
    findings = []

    if _blank(lesson.title):
        findings.append(_error(key, "missing title"))
    elif is_grammar_labeled(lesson.title):
        findings.append(_error(key, f'title looks grammar-labeled: "{lesson.title}"'))

    if known_ids is not None:
        for pid in lesson.prerequisite_ids:
            if pid not in known_ids:
                findings.append(_error(key, f"unknown prerequisite '{pid}'"))

    return findings


def check_exercise(key: str, exercise) -> List[ValidationFinding]:
    """Check one assembled exercise.

    Args:
        key: Location tag, e.g. ``[exercise] negation (work) #2``
        exercise: Any exercise variant

    Returns:
        Findings for this exercise (empty when it is well-formed)
    """
    findings = []
    kind = exercise.kind

    if _blank(exercise.prompt):
        findings.append(_error(key, "missing prompt"))

    if kind != ExerciseKind.PRODUCTION.value and _blank(exercise.answer):
        findings.append(_error(key, f"missing answer for {kind}"))

    if kind in _CHOICE_KINDS:
        options = getattr(exercise, "options", None)
        if not options or len(options) < 2:
            findings.append(_error(key, f"missing options for {kind}"))
        elif exercise.answer not in options:
            findings.append(_error(key, f"answer not in options ({exercise.answer})"))

    elif kind == ExerciseKind.REORDER.value:
        words = getattr(exercise, "words", None)
        if not words or len(words) < 2:
            findings.append(_error(key, "missing words for reorder"))
        else:
            joined = normalize_punctuation(" ".join(words))
            if joined != normalize_punctuation(exercise.answer or ""):
                findings.append(_warning(key, "reorder answer doesn't match words join"))

    elif kind == ExerciseKind.PRODUCTION.value:
        if _blank(getattr(exercise, "sample_answer", None)):
            findings.append(_warning(key, "missing sample answer"))
        if getattr(exercise, "mode", None) not in _PRODUCTION_MODES:
            findings.append(
                _error(key, 'production mode must be "speaking" or "writing"')
            )

    return findings


def check_content(
    lesson_id: str, purpose: str, content: Optional[LessonContent]
) -> List[ValidationFinding]:
    """Structural checks of one assembled lesson."""
    key = f"[content] {lesson_id} ({purpose})"

    if content is None:
        return [_error(key, f'missing content for purpose "{purpose}"')]

    findings = []
    if _blank(content.title) or _blank(content.ability_objective):
        findings.append(_error(key, "missing title or ability objective"))
    elif is_grammar_labeled(content.title):
        findings.append(_error(key, f'title looks grammar-labeled: "{content.title}"'))

    if not content.exercises:
        findings.append(_error(key, "no exercises"))

    for index, exercise in enumerate(content.exercises, 1):
        findings.extend(
            check_exercise(f"[exercise] {lesson_id} ({purpose}) #{index}", exercise)
        )

    return findings


def check_rules(
    lesson_id: str, purpose: str, learning_style: str, content: LessonContent
) -> List[ValidationFinding]:
    """Style and purpose business rules for one assembled lesson."""
    key = f"[rules] {lesson_id} ({purpose}, {learning_style})"
    findings = []

    if learning_style == "speaking":
        has_speaking = any(
            ex.kind == ExerciseKind.PRODUCTION.value
            and getattr(ex, "mode", None) == ProductionMode.SPEAKING.value
            for ex in content.exercises
        )
        if not has_speaking:
            findings.append(_error(key, "missing speaking production exercise"))

    if learning_style == "grammar":
        has_snapshot = any(
            config.GRAMMAR_SNAPSHOT_MARKER in gp.rule for gp in content.grammar_points
        )
        if not has_snapshot:
            findings.append(_warning(key, "missing grammar snapshot rule"))

    if purpose == "exams":
        if not any("timed" in ex.prompt.lower() for ex in content.exercises):
            findings.append(_warning(key, "missing timed-style exercise prompt"))

    return findings


def check_prerequisite_availability(
    catalog: Sequence[LessonCatalogItem],
) -> List[ValidationFinding]:
    """Warn about lessons that can never unlock on some purpose track.

    A lesson offered on a track is blocked there when one of its
    prerequisites is not offered on the same track.
    """
    by_id = {lesson.id: lesson for lesson in catalog}
    findings = []

    for lesson in catalog:
        for purpose in applicable_purposes(lesson):
            for pid in lesson.prerequisite_ids:
                prerequisite = by_id.get(pid)
                if prerequisite is not None and not prerequisite.applies_to(purpose):
                    findings.append(
                        _warning(
                            f"[catalog] {lesson.id} ({purpose})",
                            f"prerequisite '{pid}' is not offered on this track",
                        )
                    )

    return findings


# ============================================================================
# Full run
# ============================================================================


def _combinations(
    catalog: Sequence[LessonCatalogItem],
) -> List[Tuple[LessonCatalogItem, str]]:
    return [(lesson, purpose) for lesson in catalog for purpose in applicable_purposes(lesson)]


def validate_lessons(
    catalog: Optional[Sequence[LessonCatalogItem]] = None,
    content_provider: Optional[ContentProvider] = None,
    show_progress: bool = False,
) -> ValidationReport:
    """Validate every (lesson, purpose, style) combination.

    Args:
        catalog: Catalog to validate (default: bundled catalog)
        content_provider: ``(lesson_id, options) -> LessonContent | None``
            (default: the assembly pipeline)
        show_progress: Show tqdm progress bars

    Returns:
        ValidationReport with all errors and warnings
    """
    catalog = list(get_catalog() if catalog is None else catalog)
    provide = content_provider or build_lesson
    known_ids = [lesson.id for lesson in catalog]
    combinations = _combinations(catalog)

    errors: List[ValidationFinding] = []
    warnings: List[ValidationFinding] = []

    def record(findings: List[ValidationFinding]) -> None:
        for finding in findings:
            if finding.severity == Severity.ERROR:
                errors.append(finding)
            else:
                warnings.append(finding)

    with pipeline_stage_logger("catalog_pass", lessons=len(catalog)) as stage_logger:
        for lesson in catalog:
            record(check_catalog_entry(lesson, known_ids))
        record(check_prerequisite_availability(catalog))
        stage_logger.debug(f"{len(errors)} errors, {len(warnings)} warnings so far")

    structural_options = AssemblyOptions(
        time_commitment=config.STRUCTURAL_TIME_COMMITMENT, learning_style="balanced"
    )
    with pipeline_stage_logger("structural_pass", combinations=len(combinations)):
        for lesson, purpose in tqdm(
            combinations, desc="Structural", unit="lesson", disable=not show_progress
        ):
            options = structural_options.model_copy(update={"purpose": purpose})
            record(check_content(lesson.id, purpose, provide(lesson.id, options)))

    rules_checked = 0
    with pipeline_stage_logger(
        "rules_pass",
        combinations=len(combinations) * len(config.VALIDATED_LEARNING_STYLES),
    ):
        for lesson, purpose in tqdm(
            combinations, desc="Rules", unit="lesson", disable=not show_progress
        ):
            for style in config.VALIDATED_LEARNING_STYLES:
                options = AssemblyOptions(
                    purpose=purpose,
                    time_commitment=config.RULES_TIME_COMMITMENT,
                    learning_style=style,
                )
                content = provide(lesson.id, options)
                rules_checked += 1
                if content is None:
                    # Reported by the structural pass
                    continue
                record(check_rules(lesson.id, purpose, style, content))

    lessons_by_purpose: Dict[str, int] = {}
    for _, purpose in combinations:
        lessons_by_purpose[purpose] = lessons_by_purpose.get(purpose, 0) + 1

    report = ValidationReport(
        lessons_checked=len(catalog),
        combinations_checked=len(combinations) + rules_checked,
        errors=errors,
        warnings=warnings,
        summary_stats={
            "structural_combinations": len(combinations),
            "rules_combinations": rules_checked,
            "error_count": len(errors),
            "warning_count": len(warnings),
            "lessons_by_purpose": lessons_by_purpose,
        },
    )
    logger.info(
        f"Validated {report.lessons_checked} lessons: "
        f"{len(errors)} errors, {len(warnings)} warnings"
    )
    return report
