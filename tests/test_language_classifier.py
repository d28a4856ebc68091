# /tests/test_language_classifier.py

from types import SimpleNamespace

import pytest

from app.models.enums import Language
from app.services import language_classifier


@pytest.mark.parametrize("name, expected", [
    ("Language", None),
    ("German Language", Language.GERMAN),
    ("french", Language.FRENCH),
    ("German French", None),
    ("Mathematics", None),
    ("", None),
    (None, None),
])
def test_classify(name, expected):
    assert language_classifier.classify(name) == expected


def test_generic_language_period_is_a_language_period_but_ambiguous():
    assert language_classifier.is_language_period("Language") is True
    assert language_classifier.classify("Language") is None
    assert language_classifier.needs_manual_selection("Language") is True


def test_non_language_period():
    assert language_classifier.is_language_period("Data Structures") is False
    assert language_classifier.needs_manual_selection("Data Structures") is False


def test_parse_language_accepts_direct_tokens_only():
    assert language_classifier.parse_language(" german ") == Language.GERMAN
    assert language_classifier.parse_language("FRENCH") == Language.FRENCH
    assert language_classifier.parse_language("Spanish") is None
    assert language_classifier.parse_language(None) is None


def test_count_without_language():
    persons = [
        SimpleNamespace(id="p1", preferred_language=Language.GERMAN),
        SimpleNamespace(id="p2", preferred_language=None),
        SimpleNamespace(id="p3", preferred_language=None),
    ]
    assert language_classifier.count_without_language(persons) == 2
