"""Pydantic models for all lesson engine entities.

This module defines the catalog, lesson definition, assembly and validation
models. Assembled records are frozen: every call to the assembly pipeline
produces a fresh value and nothing is mutated afterwards.

Cross-field content rules (answer in options, minimum word counts, non-empty
prompts) are intentionally left to the lesson validator so that they can be
reported as errors or warnings instead of failing construction.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator


# ============================================================================
# Enums
# ============================================================================


class PurposeTrack(str, Enum):
    """Learner use-case context used to select flavor data."""

    WORK = "work"
    TRAVEL = "travel"
    STUDY = "study"
    RELOCATION = "relocation"
    EXAMS = "exams"
    DAILY = "daily"


class LearningStyle(str, Enum):
    """Declared learning-style preference."""

    SPEAKING = "speaking"
    GRAMMAR = "grammar"
    VOCAB = "vocab"
    BALANCED = "balanced"


class TimeCommitment(str, Enum):
    """Daily time budget tiers in minutes."""

    FIVE = "5"
    TEN = "10"
    TWENTY = "20"
    FORTY_FIVE = "45"


class CEFRLevel(str, Enum):
    """Catalog difficulty tag."""

    A1 = "a1"
    A2 = "a2"
    B1 = "b1"
    B2 = "b2"
    C1 = "c1"


class CEFRLabel(str, Enum):
    """Display label of the CEFR level on assembled content."""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"


class ExerciseKind(str, Enum):
    """Exercise variants."""

    MULTIPLE_CHOICE = "multiple-choice"
    FILL_BLANK = "fill-blank"
    REORDER = "reorder"
    TRANSLATION = "translation"
    MATCH_PAIR = "match-pair"
    PRODUCTION = "production"


class ProductionMode(str, Enum):
    """How a production exercise is answered."""

    SPEAKING = "speaking"
    WRITING = "writing"


class Severity(str, Enum):
    """Validation finding severity."""

    ERROR = "error"
    WARNING = "warning"


# ============================================================================
# Catalog
# ============================================================================


class LessonCatalogItem(BaseModel):
    """One node of the lesson prerequisite graph.

    Titles describe what the learner can do after the lesson, not the grammar
    label. Phase is used for grouping only.
    """

    id: str = Field(..., min_length=1, description="Unique lesson key")
    title: str = Field(..., description="Ability-based title")
    grammar_tag: str = Field(..., description="Short grammar label")
    group: str = Field(..., description="Display group, e.g. 'Quick Wins'")
    cefr: CEFRLevel
    phase: Literal[1, 2, 3]
    prerequisite_ids: List[str] = Field(default_factory=list)
    contexts: Union[Literal["all"], List[PurposeTrack]] = Field(
        "all", description="'all' or the purpose tracks this lesson applies to"
    )
    grammar_focus: str = Field(..., description="Grammar taught inside the ability")
    vocab_hint: str = Field("", description="Typical vocabulary for the lesson")

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "json_schema_extra": {
            "example": {
                "id": "negation",
                "title": "Express what you don't have or don't do",
                "grammar_tag": "nicht / kein",
                "group": "Quick Wins",
                "cefr": "a1",
                "phase": 1,
                "prerequisite_ids": ["articles-gender", "present-tense"],
                "contexts": "all",
                "grammar_focus": "nicht vs kein placement rules",
                "vocab_hint": "Das ist nicht..., Ich habe kein...",
            }
        },
    }

    def applies_to(self, purpose_track: str) -> bool:
        """True if the lesson is offered on the given (normalized) purpose track."""
        if self.contexts == "all":
            return True
        return purpose_track in self.contexts


# ============================================================================
# Content building blocks
# ============================================================================


class GrammarTable(BaseModel):
    """Small conjugation/declension table."""

    headers: List[str]
    rows: List[List[str]]

    model_config = {"frozen": True, "extra": "forbid"}


class GrammarPoint(BaseModel):
    """One grammar explanation with an optional table."""

    rule: str
    table: Optional[GrammarTable] = None

    model_config = {"frozen": True, "extra": "forbid"}


class VocabItem(BaseModel):
    """Vocabulary entry."""

    german: str
    english: str
    example: Optional[str] = None

    model_config = {"frozen": True, "extra": "forbid"}


class DialogueLine(BaseModel):
    """One dialogue turn."""

    speaker: str
    german: str
    english: str

    model_config = {"frozen": True, "extra": "forbid"}


class MatchPair(BaseModel):
    """Left/right pair for match-pair exercises."""

    left: str
    right: str

    model_config = {"frozen": True, "extra": "forbid"}


# ============================================================================
# Exercises (tagged union on `kind`)
# ============================================================================


class _ExerciseBase(BaseModel):
    prompt: str = Field(..., description="Instruction shown to the learner")
    explanation: Optional[str] = Field(None, description="Shown after answering")

    model_config = {"frozen": True, "extra": "forbid"}


class MultipleChoiceExercise(_ExerciseBase):
    kind: Literal["multiple-choice"] = "multiple-choice"
    options: List[str]
    answer: str


class FillBlankExercise(_ExerciseBase):
    kind: Literal["fill-blank"] = "fill-blank"
    options: List[str]
    answer: str


class ReorderExercise(_ExerciseBase):
    kind: Literal["reorder"] = "reorder"
    words: List[str]
    answer: str


class TranslationExercise(_ExerciseBase):
    kind: Literal["translation"] = "translation"
    answer: str


class MatchPairExercise(_ExerciseBase):
    kind: Literal["match-pair"] = "match-pair"
    pairs: List[MatchPair]
    answer: str = Field(..., description="Canonical 'left = right' listing")


class ProductionExercise(_ExerciseBase):
    """Free speaking/writing task, graded as an always-correct placeholder."""

    kind: Literal["production"] = "production"
    answer: str = ""
    sample_answer: Optional[str] = None
    mode: ProductionMode


Exercise = Annotated[
    Union[
        MultipleChoiceExercise,
        FillBlankExercise,
        ReorderExercise,
        TranslationExercise,
        MatchPairExercise,
        ProductionExercise,
    ],
    Field(discriminator="kind"),
]


# ============================================================================
# Lesson definitions (data files)
# ============================================================================


class ProductionPrompt(BaseModel):
    """Purpose-specific production task."""

    prompt: str
    sample_answer: str

    model_config = {"frozen": True, "extra": "forbid"}


class ProductionSlot(BaseModel):
    """Placeholder in a definition's exercise list, filled from the context."""

    kind: Literal["production"] = "production"
    explanation: Optional[str] = None

    model_config = {"frozen": True, "extra": "forbid"}


ExerciseSpec = Annotated[
    Union[
        MultipleChoiceExercise,
        FillBlankExercise,
        ReorderExercise,
        TranslationExercise,
        MatchPairExercise,
        ProductionSlot,
    ],
    Field(discriminator="kind"),
]


class LessonContext(BaseModel):
    """Purpose-specific part of a lesson (literal or slot template)."""

    title: str
    ability_objective: str
    vocabulary: List[VocabItem]
    dialogue: List[DialogueLine]
    production: ProductionPrompt
    skill_unlock: str
    review_suggestion: str

    model_config = {"frozen": True, "extra": "forbid"}


class LessonDefinition(BaseModel):
    """Authoring format of one lesson file under ``data/lessons``.

    Exactly one of ``contexts`` (literal table per purpose track) or
    ``context_template`` (interpolated with purpose flavor slots) is set.
    """

    lesson_id: str
    contexts: Optional[Dict[PurposeTrack, LessonContext]] = None
    context_template: Optional[LessonContext] = None
    include_flavor_vocabulary: bool = Field(
        False, description="Append the purpose flavor vocabulary (templates only)"
    )
    grammar_points: List[GrammarPoint] = Field(..., min_length=1)
    grammar_snapshot: GrammarPoint
    exercises: List[ExerciseSpec] = Field(..., min_length=1)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("contexts")
    @classmethod
    def validate_all_tracks(cls, v):
        """Literal context tables must cover every purpose track."""
        if v is not None:
            missing = set(PurposeTrack) - set(v)
            if missing:
                names = sorted(track.value for track in missing)
                raise ValueError(f"contexts missing purpose tracks: {names}")
        return v

    @model_validator(mode="after")
    def validate_context_source(self):
        """Exactly one of contexts or context_template must be set."""
        if (self.contexts is None) == (self.context_template is None):
            raise ValueError(
                f"Lesson '{self.lesson_id}' must define exactly one of "
                "'contexts' or 'context_template'"
            )
        return self


class PurposeFlavor(BaseModel):
    """Reusable flavor data for one purpose track.

    Every string field doubles as a ``{slot}`` for lesson context templates.
    """

    learner: str = Field(..., description="Learner's name in dialogues")
    partner: str = Field(..., description="Conversation partner's name")
    partner_role: str = Field(..., description="Partner role in English, e.g. 'colleague'")
    place_at: str = Field(..., description="German location phrase, e.g. 'im Büro'")
    place_en: str = Field(..., description="English location phrase")
    setting_en: str = Field(..., description="English setting for titles")
    object_nom: str = Field(..., description="Recurring noun, nominative")
    object_acc: str = Field(..., description="Recurring noun, accusative")
    object_en: str
    event: str = Field(..., description="Recurring event noun with article")
    event_en: str
    document: str = Field(..., description="Recurring document noun with article")
    document_en: str
    task_prefix: str = Field(..., description="Production prompt prefix")
    vocabulary: List[VocabItem] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "forbid"}

    def slots(self) -> Dict[str, str]:
        """Template slot values (all string fields)."""
        return self.model_dump(exclude={"vocabulary"})


# ============================================================================
# Assembly input/output
# ============================================================================


class AssemblyOptions(BaseModel):
    """Learner preferences passed explicitly to every assembly call.

    Values are kept as plain strings: unrecognized purposes normalize to
    'daily' during assembly instead of failing here.
    """

    purpose: Optional[str] = None
    time_commitment: Optional[str] = None
    learning_style: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("purpose", "time_commitment", "learning_style", mode="before")
    @classmethod
    def coerce_to_str(cls, v):
        """Accept enum members and integer minute tiers."""
        if v is None:
            return None
        if isinstance(v, Enum):
            return v.value
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class LearnerProfile(BaseModel):
    """Learner profile as stored by the external profile store.

    Partial stored data is merged over the defaults; unknown keys are ignored.
    """

    onboarded: bool = False
    purpose: Optional[str] = None
    level: Optional[str] = None
    time_commitment: Optional[str] = None
    learning_style: Optional[str] = None
    region: Optional[str] = None
    deadline: Optional[str] = Field(None, description="ISO date or 'none'")

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    @field_validator("time_commitment", mode="before")
    @classmethod
    def coerce_minutes(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @classmethod
    def from_stored(cls, raw: Optional[Dict[str, Any]]) -> "LearnerProfile":
        """Build a profile from stored JSON, accepting camelCase keys."""
        if not raw:
            return cls()
        renamed = {
            "timeCommitment": "time_commitment",
            "learningStyle": "learning_style",
        }
        data = {renamed.get(key, key): value for key, value in raw.items()}
        return cls.model_validate(data)

    def to_assembly_options(self) -> AssemblyOptions:
        return AssemblyOptions(
            purpose=self.purpose,
            time_commitment=self.time_commitment,
            learning_style=self.learning_style,
        )


class LessonContent(BaseModel):
    """Fully assembled, budgeted lesson record."""

    lesson_id: str
    title: str
    level: CEFRLabel
    purpose_track: PurposeTrack
    prerequisites: List[str]
    ability_objective: str
    grammar_focus: str
    grammar_points: List[GrammarPoint]
    vocabulary: List[VocabItem]
    dialogue: List[DialogueLine]
    exercises: List[Exercise]
    skill_unlock: str
    review_suggestion: str

    # Player-facing aliases
    goal: str = ""
    review_hint: str = ""

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "lesson_id": "greetings-intro",
                "title": "Introduce yourself in a meeting",
                "level": "A1",
                "purpose_track": "work",
                "prerequisites": [],
                "ability_objective": "Introduce yourself formally and state your role in a meeting.",
                "grammar_focus": "Sein/heißen present, basic word order",
                "grammar_points": [{"rule": "Use Sie for formal situations."}],
                "vocabulary": [{"german": "Guten Tag", "english": "Good day"}],
                "dialogue": [
                    {
                        "speaker": "Alex",
                        "german": "Guten Tag. Ich heiße Alex.",
                        "english": "Good day. My name is Alex.",
                    }
                ],
                "exercises": [
                    {
                        "kind": "fill-blank",
                        "prompt": "Complete: 'Ich ___ neu im Team.'",
                        "options": ["bin", "bist", "ist", "sind"],
                        "answer": "bin",
                    }
                ],
                "skill_unlock": "You can introduce yourself in a formal work setting.",
                "review_suggestion": "Repeat your introduction aloud before your next meeting.",
            }
        },
    }


class PracticeExercise(BaseModel):
    """Flattened exercise record for the practice pool."""

    id: str = Field(..., description="'<lesson_id>-ex-<index>'")
    lesson_id: str
    lesson_title: str
    kind: ExerciseKind
    prompt: str
    answer: str
    options: Optional[List[str]] = None
    words: Optional[List[str]] = None
    pairs: Optional[List[MatchPair]] = None
    explanation: Optional[str] = None

    model_config = {"frozen": True}


# ============================================================================
# Validation
# ============================================================================


class ValidationFinding(BaseModel):
    """One severity-tagged validation message."""

    severity: Severity
    location: str = Field(
        ..., description="Catalog id, exercise index or purpose/style combination"
    )
    message: str

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class ValidationReport(BaseModel):
    """Aggregated outcome of a full validation run."""

    run_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    lessons_checked: int
    combinations_checked: int
    errors: List[ValidationFinding] = Field(default_factory=list)
    warnings: List[ValidationFinding] = Field(default_factory=list)
    summary_stats: Dict[str, Any] = Field(default_factory=dict)

    @property
    def passed(self) -> bool:
        """True when no error was recorded (warnings are advisory)."""
        return not self.errors
