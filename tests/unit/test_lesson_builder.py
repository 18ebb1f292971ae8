"""Unit tests for lesson builders and the builder registry."""

import json

import pytest

from deutschmeister.exceptions import LessonDataError
from deutschmeister.generators.lesson_builder import (
    apply_grammar_clarity,
    build_lesson,
    build_registry,
    load_lesson_definition,
    load_lesson_definitions,
    make_builder,
    to_level_label,
)
from deutschmeister.validators.schema import (
    AssemblyOptions,
    CEFRLabel,
    GrammarPoint,
    LessonDefinition,
)


@pytest.fixture
def registry(make_item, template_definition, flavors):
    """Registry with one templated lesson and one authored-context lesson."""
    data = template_definition.model_dump(mode="json", exclude_none=True)
    data["lesson_id"] = "left"
    template = data.pop("context_template")
    data["contexts"] = {
        track: {**template, "title": f"Say hello ({track})"} for track in flavors
    }
    authored = LessonDefinition.model_validate(data)

    catalog = [make_item("start"), make_item("left", ["start"], cefr="b2")]
    return build_registry(
        catalog, {"start": template_definition, "left": authored}, flavors
    )


class TestHelpers:
    """Test builder helper functions."""

    @pytest.mark.parametrize(
        "cefr,label", [("a1", CEFRLabel.A1), ("b2", CEFRLabel.B2), ("x", CEFRLabel.A1)]
    )
    def test_level_label(self, cefr, label):
        assert to_level_label(cefr) == label

    def test_grammar_snapshot_only_for_grammar_style(self):
        points = [GrammarPoint(rule="Rule")]
        snapshot = GrammarPoint(rule="Grammar snapshot: x")
        assert apply_grammar_clarity(points, "grammar", snapshot) == [*points, snapshot]
        for style in ("balanced", "speaking", "vocab", None):
            assert apply_grammar_clarity(points, style, snapshot) == points


class TestBuilder:
    """Test a single templated builder."""

    def test_builder_name(self, make_item, template_definition, flavors):
        build = make_builder(make_item("start"), template_definition, flavors)
        assert build.__name__ == "build_start"

    def test_assembles_purpose_context(self, registry):
        content = build_lesson(
            "start",
            AssemblyOptions(purpose="travel", time_commitment="45"),
            registry=registry,
        )
        assert content.title == "Say hello while traveling"
        assert content.purpose_track == "travel"
        assert content.level == CEFRLabel.A1
        assert content.prerequisites == []
        assert content.goal == content.ability_objective
        assert content.review_hint == content.review_suggestion
        assert len(content.dialogue) == 3

    def test_unknown_purpose_uses_daily(self, registry):
        other = build_lesson("start", AssemblyOptions(purpose="other"), registry=registry)
        daily = build_lesson("start", AssemblyOptions(purpose="daily"), registry=registry)
        assert other == daily

    def test_missing_options_default_to_daily(self, registry):
        content = build_lesson("start", registry=registry)
        assert content.purpose_track == "daily"

    def test_production_mode_follows_style(self, registry):
        """Test that only the mode changes when switching to speaking."""
        base = AssemblyOptions(purpose="work", time_commitment="20")
        writing = build_lesson(
            "start", base.model_copy(update={"learning_style": "balanced"}), registry=registry
        )
        speaking = build_lesson(
            "start", base.model_copy(update={"learning_style": "speaking"}), registry=registry
        )
        w = [ex for ex in writing.exercises if ex.kind == "production"][0]
        s = [ex for ex in speaking.exercises if ex.kind == "production"][0]
        assert w.mode == "writing"
        assert s.mode == "speaking"
        assert (w.prompt, w.sample_answer) == (s.prompt, s.sample_answer)
        assert [ex.kind for ex in writing.exercises] == [ex.kind for ex in speaking.exercises]

    def test_production_filled_from_context(self, registry):
        content = build_lesson("start", AssemblyOptions(purpose="work"), registry=registry)
        production = content.exercises[3]
        assert production.prompt == "Roleplay: Greet your colleague."
        assert production.sample_answer == "Hallo, ich bin Alex."
        assert production.answer == ""

    def test_grammar_style_appends_snapshot(self, registry):
        content = build_lesson(
            "start", AssemblyOptions(learning_style="grammar"), registry=registry
        )
        assert content.grammar_points[-1].rule.startswith("Grammar snapshot")

    def test_short_session_budget_applied(self, registry):
        content = build_lesson(
            "start", AssemblyOptions(purpose="work", time_commitment="5"), registry=registry
        )
        assert [ex.kind for ex in content.exercises] == [
            "multiple-choice",
            "fill-blank",
            "reorder",
        ]
        assert len(content.dialogue) == 2

    def test_exam_timing_applied(self, registry):
        content = build_lesson(
            "start", AssemblyOptions(purpose="exams", time_commitment="5"), registry=registry
        )
        assert content.exercises[0].prompt.startswith("Timed (45s): ")

    def test_deterministic(self, registry):
        options = AssemblyOptions(purpose="study", learning_style="speaking")
        assert build_lesson("start", options, registry=registry) == build_lesson(
            "start", options, registry=registry
        )


class TestRegistry:
    """Test registry construction and dispatch."""

    def test_registry_in_catalog_order(self, registry):
        assert list(registry) == ["start", "left"]

    def test_authored_contexts(self, registry):
        content = build_lesson("left", AssemblyOptions(purpose="exams"), registry=registry)
        assert content.title == "Say hello (exams)"
        assert content.level == CEFRLabel.B2
        assert content.prerequisites == ["start"]

    def test_unknown_lesson_returns_none(self, registry):
        assert build_lesson("does-not-exist", registry=registry) is None

    def test_missing_definition(self, make_item, template_definition, flavors):
        catalog = [make_item("start"), make_item("left", ["start"])]
        with pytest.raises(LessonDataError, match="left"):
            build_registry(catalog, {"start": template_definition}, flavors)

    def test_orphan_definition_ignored(self, make_item, template_definition, flavors):
        orphan = template_definition.model_copy(update={"lesson_id": "orphan"})
        registry = build_registry(
            [make_item("start")],
            {"start": template_definition, "orphan": orphan},
            flavors,
        )
        assert list(registry) == ["start"]

    def test_unknown_slot_fails_at_registry_build(
        self, make_item, template_definition_data, flavors
    ):
        template_definition_data["context_template"]["title"] = "Say hello {boss}"
        definition = LessonDefinition.model_validate(template_definition_data)
        with pytest.raises(LessonDataError, match="boss"):
            build_registry([make_item("start")], {"start": definition}, flavors)


class TestDefinitionFiles:
    """Test loading lesson definition files."""

    def test_load_definition(self, tmp_path, template_definition_data):
        path = tmp_path / "start.json"
        path.write_text(json.dumps(template_definition_data), encoding="utf-8")
        definition = load_lesson_definition(path)
        assert definition.lesson_id == "start"

    def test_id_must_match_file_name(self, tmp_path, template_definition_data):
        path = tmp_path / "other.json"
        path.write_text(json.dumps(template_definition_data), encoding="utf-8")
        with pytest.raises(LessonDataError, match="declares lesson_id"):
            load_lesson_definition(path)

    def test_invalid_definition(self, tmp_path, template_definition_data):
        del template_definition_data["grammar_snapshot"]
        path = tmp_path / "start.json"
        path.write_text(json.dumps(template_definition_data), encoding="utf-8")
        with pytest.raises(LessonDataError, match="Invalid lesson definition"):
            load_lesson_definition(path)

    def test_load_directory(self, tmp_path, template_definition_data):
        (tmp_path / "start.json").write_text(
            json.dumps(template_definition_data), encoding="utf-8"
        )
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
        assert list(load_lesson_definitions(tmp_path)) == ["start"]
