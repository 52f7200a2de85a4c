"""Selection of the language pair to convert."""

from typing import Iterable, Optional

from .errors import AmbiguousLanguagePair, UnavailableLanguage
from .models import LanguagePair


def resolve(
    available: Iterable[str],
    from_hint: Optional[str] = None,
    to_hint: Optional[str] = None,
) -> LanguagePair:
    """Pick exactly one ordered (source, target) pair.

    Args:
        available: Language codes declared in the document, in declared order
        from_hint: Requested source language, if any
        to_hint: Requested target language, if any

    Returns:
        The resolved LanguagePair

    Raises:
        UnavailableLanguage: If a hint is not one of the available languages
        AmbiguousLanguagePair: If no unique pair can be chosen
    """
    languages = list(dict.fromkeys(available))

    for hint in (from_hint, to_hint):
        if hint and hint not in languages:
            raise UnavailableLanguage(hint, languages)

    if from_hint and to_hint:
        if from_hint == to_hint:
            raise AmbiguousLanguagePair(languages)
        return LanguagePair(from_hint, to_hint)

    if len(languages) == 2:
        if from_hint:
            return LanguagePair(from_hint, _other(languages, from_hint))
        if to_hint:
            return LanguagePair(_other(languages, to_hint), to_hint)
        return LanguagePair(*languages)

    raise AmbiguousLanguagePair(languages)


def _other(languages, language: str) -> str:
    return next(code for code in languages if code != language)


def detect_languages(reader, from_hint: Optional[str] = None, to_hint: Optional[str] = None) -> LanguagePair:
    """Resolve the pair for a TMX reader exposing ``languages()``."""
    return resolve(reader.languages(), from_hint, to_hint)
