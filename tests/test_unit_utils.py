import sys
import os
import pytest
from unittest.mock import patch

current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
sys.path.insert(0, project_root)

from savings_engine.utils import (
    APP_SETTINGS,
    DATA_EXPIRY_MS,
    format_currency,
    generate_progress_bar_markdown,
    is_diagnostic_mode,
    iso_timestamp,
    now_ms,
)
from savings_engine.translations import TRANSLATIONS, translate
from savings_engine.assessment import QUESTIONS


@pytest.mark.parametrize("value, expected", [
    (15000, "$15,000"),
    (8000.4, "$8,000"),
    (0, "$0"),
    ("not a number", "$0"),
    (None, "$0"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_now_ms_uses_injected_clock():
    assert now_ms(lambda: 1_700_000_000.5) == 1_700_000_000_500


def test_iso_timestamp_is_utc():
    assert iso_timestamp(0) == "1970-01-01T00:00:00+00:00"


def test_data_expiry_is_seven_days():
    assert DATA_EXPIRY_MS == 7 * 24 * 60 * 60 * 1000


@pytest.mark.parametrize("environment, expected", [
    ("production", False),
    ("development", True),
    ("staging", True),
])
def test_is_diagnostic_mode(environment, expected):
    with patch.dict(APP_SETTINGS, {"environment": environment}):
        assert is_diagnostic_mode() == expected


def test_progress_bar_marks_completed_current_and_future_steps():
    markdown = generate_progress_bar_markdown(["1", "2", "Contact"], current_step=1)
    parts = markdown.split(" **--** ")
    assert len(parts) == 3
    assert parts[0].startswith(":green-badge[")
    assert parts[1].startswith(":violet-badge[")
    assert parts[2].startswith(":grey-badge[")
    assert "3: Contact" in parts[2]


def test_progress_bar_all_green_when_final_step_completed():
    markdown = generate_progress_bar_markdown(["1", "2"], current_step=1, final_step_completed=True)
    assert markdown.count(":green-badge[") == 2


# ============ TRANSLATIONS ============
def test_translation_tables_have_the_same_keys():
    assert set(TRANSLATIONS["en"]) == set(TRANSLATIONS["fr"])


def test_every_question_string_is_translated():
    for question in QUESTIONS:
        for field in ("title", "help"):
            if question[field]:
                assert question[field] in TRANSLATIONS["en"], question[field]


@pytest.mark.parametrize("key, language, expected", [
    ("blocked.title", "en", "Too Many Submissions"),
    ("blocked.title", "fr", "Trop de Soumissions"),
    ("blocked.title", "de", "Too Many Submissions"),  # unknown language falls back to English
    ("no.such.key", "fr", "no.such.key"),
])
def test_translate(key, language, expected):
    assert translate(key, language) == expected


def test_translate_never_raises_on_odd_input():
    assert translate(["not", "hashable"]) == str(["not", "hashable"])
