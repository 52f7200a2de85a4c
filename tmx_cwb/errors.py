"""Exceptions raised by the conversion pipeline.

Every error is fatal to the conversion that raised it; there is no
partial-success mode.
"""

from typing import Iterable, Optional

from .models import ToolResult


class TMXCWBError(Exception):
    """Base class for all conversion failures."""

    exit_code = 1


class UnavailableLanguage(TMXCWBError):
    """A requested language is not present in the TMX document."""

    def __init__(self, language: str, available: Iterable[str] = ()):
        self.language = language
        self.available = list(available)
        super().__init__(f"Language {language} not available")


class AmbiguousLanguagePair(TMXCWBError):
    """The source/target pair cannot be resolved uniquely."""

    def __init__(self, available: Iterable[str] = (), message: Optional[str] = None):
        self.available = list(available)
        super().__init__(message or (
            "Can't guess what languages to use "
            f"(document declares: {', '.join(self.available) or 'none'})"
        ))


class CorpusNotFound(TMXCWBError):
    """A named corpus cannot be opened."""

    def __init__(self, name: str, registry: Optional[str] = None):
        self.name = name
        self.registry = registry
        where = f" in registry {registry}" if registry else ""
        super().__init__(f"Can't find corpus [{name}]{where}")


class NoAlignmentData(TMXCWBError):
    """The alignment attribute is missing or holds no blocks."""

    def __init__(self, corpus: str, attribute: str):
        self.corpus = corpus
        self.attribute = attribute
        super().__init__(f"Corpus [{corpus}] has no alignment data for [{attribute}]")


class MissingAttribute(TMXCWBError):
    """A corpus lacks the positional attribute holding surface strings."""

    def __init__(self, corpus: str, attribute: str):
        self.corpus = corpus
        self.attribute = attribute
        super().__init__(f"Corpus [{corpus}] has no positional attribute [{attribute}]")


class StagingIOFailure(TMXCWBError):
    """A staging file cannot be created or written."""


class TMXFileNotFound(StagingIOFailure):
    """The input TMX file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Can't open [{path}] file for reading")


class MalformedTMX(TMXCWBError):
    """The input TMX file is not well-formed XML."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Can't parse [{path}]: {reason}")


class CorporaFolderMissing(TMXCWBError):
    """The folder holding corpus data does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Need a corpora folder: [{path}] does not exist")


class RegistryNotFound(TMXCWBError):
    """No usable corpus registry folder was found."""

    def __init__(self):
        super().__init__("Could not detect a suitable CWB registry folder")


class MissingCorpusName(TMXCWBError):
    """Export was requested without both corpus names."""

    def __init__(self):
        super().__init__("Source and target corpora names are required")


class ExternalToolFailure(TMXCWBError):
    """An external indexing or import step exited abnormally."""

    exit_code = 2

    def __init__(self, result: ToolResult):
        self.result = result
        super().__init__(result.describe())
