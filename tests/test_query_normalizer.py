import pytest

from tools.web.query_normalizer import build_query, normalize


def test_trims_lowercases_and_collapses_whitespace():
    assert normalize("   Hello   WORLD   ") == "hello world"


def test_non_latin_scripts_are_preserved():
    assert normalize("   스프링   부트   강의   ") == "스프링 부트 강의"


def test_none_and_blank_become_empty():
    assert normalize(None) == ""
    assert normalize("   \t\n ") == ""


def test_tabs_and_newlines_collapse_to_single_space():
    assert normalize("spring\t\tboot\n  tutorial") == "spring boot tutorial"


@pytest.mark.parametrize(
    "raw",
    ["  Spring  boot  ", "spring boot", "SPRING\tBOOT", "스프링   부트", "", "  a  B  c  ", "Ünïcödé  Tëxt"],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


def test_different_spellings_share_one_key():
    assert normalize("spring boot") == normalize(" Spring  boot  ")


def test_build_query_keeps_raw_and_normalized():
    query = build_query("  Python  ")
    assert query.raw == "  Python  "
    assert query.normalized == "python"
