"""Tests for language pair resolution."""

import pytest

from tmx_cwb.errors import AmbiguousLanguagePair, UnavailableLanguage
from tmx_cwb.language_detector import detect_languages, resolve
from tmx_cwb.models import LanguagePair
from tmx_cwb.tmx_reader import TMXReader


class TestResolve:
    """Tests for resolve()."""

    def test_two_languages_without_hints_keep_declared_order(self):
        assert resolve(["PT", "EN"]) == LanguagePair("PT", "EN")
        assert resolve(["EN", "PT"]) == LanguagePair("EN", "PT")

    def test_both_hints_returned_unchanged(self):
        assert resolve(["PT", "EN", "FR"], "FR", "PT") == LanguagePair("FR", "PT")

    def test_source_hint_infers_target(self):
        assert resolve(["PT", "EN"], from_hint="EN") == LanguagePair("EN", "PT")

    def test_target_hint_infers_source(self):
        assert resolve(["PT", "EN"], to_hint="PT") == LanguagePair("EN", "PT")

    @pytest.mark.parametrize("from_hint,to_hint", [("DE", None), (None, "DE"), ("PT", "DE")])
    def test_unknown_hint_fails(self, from_hint, to_hint):
        with pytest.raises(UnavailableLanguage) as exc_info:
            resolve(["PT", "EN"], from_hint, to_hint)
        assert exc_info.value.language == "DE"

    def test_three_languages_without_hints_are_ambiguous(self):
        with pytest.raises(AmbiguousLanguagePair):
            resolve(["PT", "EN", "FR"])

    def test_one_hint_among_three_languages_is_ambiguous(self):
        with pytest.raises(AmbiguousLanguagePair):
            resolve(["PT", "EN", "FR"], from_hint="PT")

    @pytest.mark.parametrize("languages", [[], ["PT"]])
    def test_too_few_languages_are_ambiguous(self, languages):
        with pytest.raises(AmbiguousLanguagePair):
            resolve(languages)

    def test_same_language_twice_is_rejected(self):
        with pytest.raises(AmbiguousLanguagePair):
            resolve(["PT", "EN"], "PT", "PT")

    def test_duplicate_declarations_count_once(self):
        assert resolve(["PT", "EN", "PT"]) == LanguagePair("PT", "EN")


class TestDetectLanguages:
    """Tests for detection on a TMX reader."""

    def test_detects_pair_from_document(self, two_language_tmx):
        assert detect_languages(TMXReader(two_language_tmx)) == LanguagePair("PT", "EN")

    def test_three_language_document_needs_hints(self, three_language_tmx):
        reader = TMXReader(three_language_tmx)
        with pytest.raises(AmbiguousLanguagePair):
            detect_languages(reader)
        assert detect_languages(reader, "FR", "EN") == LanguagePair("FR", "EN")
