"""Tests for lexical normalization."""

import pytest

from alumni_search.pipeline.normalizer import apply_corrections, contains_term, normalize


class TestNormalize:
    def test_case_punctuation_and_whitespace(self) -> None:
        assert normalize("  Web   DEVELOPERS in Pune!! ") == "web developers in pune"

    def test_spelling_and_city_aliases(self) -> None:
        assert normalize("Developper in Bengaluru") == "developer in bangalore"
        assert normalize("lawer from bombay") == "lawyer from mumbai"

    def test_possessive_is_kept(self) -> None:
        assert normalize("Raj's profile?") == "raj's profile"

    def test_quotes_are_stripped(self) -> None:
        assert normalize("'hello' \"there\"") == "hello there"

    def test_skill_symbols_survive(self) -> None:
        assert normalize("C++ and C# devs, R&D") == "c++ and c# devs r&d"

    def test_corrections_match_whole_words_only(self) -> None:
        assert normalize("bombayite") == "bombayite"
        assert normalize("hyd-based") == "hyd-based"

    def test_underscores_become_spaces(self) -> None:
        assert normalize("data_science") == "data science"

    def test_non_string_input(self) -> None:
        assert normalize(None) == ""
        assert normalize(42) == "42"

    def test_blank_input(self) -> None:
        assert normalize("  ?!  ") == ""

    def test_custom_corrections(self) -> None:
        assert normalize("devs in nyc", {"nyc": "new york"}) == "devs in new york"

    def test_empty_table_disables_corrections(self) -> None:
        assert normalize("developper", {}) == "developper"

    @pytest.mark.parametrize(
        "raw",
        [
            "Developper!!! in BOMBAY",
            "who's  raj?",
            "'quoted' text",
            "hyd blr bengaluru",
            "full-stack / c++ , node.js",
            "",
        ],
    )
    def test_idempotent(self, raw: str) -> None:
        once = normalize(raw)
        assert normalize(once) == once


class TestApplyCorrections:
    def test_single_pass(self) -> None:
        table = {"blr": "bangalore", "bengaluru": "bangalore"}
        assert apply_corrections("blr or bengaluru", table) == "bangalore or bangalore"

    def test_empty_table(self) -> None:
        assert apply_corrections("anything", {}) == "anything"


class TestContainsTerm:
    @pytest.mark.parametrize(
        ("text", "term"),
        [
            ("ai researcher", "ai"),
            ("mentor to founders", "founder"),
            ("pimpri-chinchwad", "pimpri"),
            ("c++ and rust", "c++"),
            ("full stack web developer", "Web Developer"),
        ],
    )
    def test_matches(self, text: str, term: str) -> None:
        assert contains_term(text, term)

    @pytest.mark.parametrize(
        ("text", "term"),
        [
            ("corporate training manager, chennai", "ai"),
            ("html and css", "ml"),
            ("ukraine", "uk"),
            ("rapid prototyping", "api"),
            ("anything", "  "),
        ],
    )
    def test_rejects_partial_words(self, text: str, term: str) -> None:
        assert not contains_term(text, term)
