"""Shared fixtures: small synthetic catalogs and lesson definitions."""

import logging

import pytest

from deutschmeister.catalog.graph import get_catalog
from deutschmeister.generators.lesson_builder import get_builder_registry
from deutschmeister.templates.purpose_flavors import get_purpose_flavors
from deutschmeister.validators.schema import LessonCatalogItem, LessonDefinition


def make_item(lesson_id, prerequisites=(), contexts="all", cefr="a1", title=None):
    return LessonCatalogItem(
        id=lesson_id,
        title=title or f"Talk about {lesson_id}",
        grammar_tag="tag",
        group="Quick Wins",
        cefr=cefr,
        phase=1,
        prerequisite_ids=list(prerequisites),
        contexts=contexts,
        grammar_focus=f"{lesson_id} focus",
    )


@pytest.fixture(name="make_item")
def make_item_fixture():
    """Factory for catalog entries with sensible defaults."""
    return make_item


@pytest.fixture
def small_catalog():
    """Diamond-shaped catalog: start -> (left, work-only right) -> finish."""
    return [
        make_item("start"),
        make_item("left", ["start"]),
        make_item("right", ["start"], contexts=["work"]),
        make_item("finish", ["left", "right"], cefr="b1"),
    ]


@pytest.fixture
def template_definition_data():
    """Raw definition of a parameterized lesson with a production slot."""
    return {
        "lesson_id": "start",
        "context_template": {
            "title": "Say hello {setting_en}",
            "ability_objective": "Greet your {partner_role} {place_en}.",
            "vocabulary": [
                {"german": "Hallo", "english": "Hello"},
                {"german": "Tschüss", "english": "Bye"},
            ],
            "dialogue": [
                {"speaker": "{partner}", "german": "Hallo!", "english": "Hello!"},
                {"speaker": "{learner}", "german": "Hallo, {partner}!", "english": "Hello!"},
                {"speaker": "{partner}", "german": "Wie geht's?", "english": "How are you?"},
            ],
            "production": {
                "prompt": "{task_prefix}Greet your {partner_role}.",
                "sample_answer": "Hallo, ich bin {learner}.",
            },
            "skill_unlock": "You can greet people {setting_en}.",
            "review_suggestion": "Greet someone today.",
        },
        "grammar_points": [{"rule": "Hallo is informal."}],
        "grammar_snapshot": {"rule": "Grammar snapshot: greetings do not inflect."},
        "exercises": [
            {
                "kind": "multiple-choice",
                "prompt": "Pick the greeting.",
                "options": ["Hallo", "Danke"],
                "answer": "Hallo",
            },
            {
                "kind": "fill-blank",
                "prompt": "___, Tom!",
                "options": ["Hallo", "Bitte"],
                "answer": "Hallo",
            },
            {
                "kind": "reorder",
                "prompt": "Put the words in order.",
                "words": ["Hallo", "Tom", "!"],
                "answer": "Hallo Tom!",
            },
            {"kind": "production"},
            {
                "kind": "translation",
                "prompt": "Translate: Bye",
                "answer": "Tschüss",
            },
        ],
    }


@pytest.fixture
def template_definition(template_definition_data):
    return LessonDefinition.model_validate(template_definition_data)


@pytest.fixture
def flavors():
    """Bundled purpose flavor table."""
    return get_purpose_flavors()


@pytest.fixture
def clear_data_caches():
    """Reset the cached bundled data before and after a test."""

    def clear():
        get_catalog.cache_clear()
        get_purpose_flavors.cache_clear()
        get_builder_registry.cache_clear()

    clear()
    yield
    clear()


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() changes to the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
