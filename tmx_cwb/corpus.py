"""Corpus capability interfaces and an in-memory implementation.

The alignment exporter only talks to these interfaces; ``cwb.py`` adapts
them to the IMS Open Corpus Workbench. The in-memory classes index
staging files directly and are used for round trips without external
tools.
"""

from abc import ABC, abstractmethod
from bisect import insort
from typing import Dict, List, Optional, Tuple

from .errors import CorpusNotFound
from .models import AlignmentBlock, ToolResult
from .staging import read_alignment_map, read_blocks, tu_key


class PositionalAttribute(ABC):
    """Token-level attribute addressable by corpus position."""

    @abstractmethod
    def size(self) -> int:
        """Number of tokens in the corpus."""

    @abstractmethod
    def tokens(self, start: int, end: int) -> List[str]:
        """Strings at positions ``start..end`` inclusive; empty if end < start."""


class AlignmentAttribute(ABC):
    """Cross-corpus alignment attribute keyed by block index."""

    @abstractmethod
    def block_count(self) -> int:
        """Number of alignment blocks."""

    @abstractmethod
    def block(self, index: int) -> AlignmentBlock:
        """Token spans of the block at ``index``."""


class Corpus(ABC):
    """An indexed, tokenized text for one language."""

    name: str

    @abstractmethod
    def attribute(self, name: str) -> PositionalAttribute:
        """Positional attribute by name (e.g. ``word``)."""

    @abstractmethod
    def alignment(self, target: str) -> Optional[AlignmentAttribute]:
        """Alignment attribute towards corpus ``target``, or None if absent."""


class CorpusRegistry(ABC):
    """Opens corpora by name."""

    @abstractmethod
    def open(self, name: str) -> Corpus:
        """Open a corpus.

        Raises:
            CorpusNotFound: If no corpus is registered under ``name``
        """


class CorpusBuilder(ABC):
    """Indexing steps turning staging files into aligned corpora.

    Each step reports a ToolResult instead of raising, so the caller
    decides how a failed step aborts the build.
    """

    @abstractmethod
    def encode(self, staging_path, corpus_name: str) -> ToolResult:
        """Encode a staging file as corpus ``corpus_name``."""

    @abstractmethod
    def make(self, corpus_name: str) -> ToolResult:
        """Build indices for an encoded corpus."""

    @abstractmethod
    def import_alignment(self, alignment_path, inverse: bool = False) -> ToolResult:
        """Import an alignment map, optionally in the target to source direction."""


# In-memory implementation


class MemoryAttribute(PositionalAttribute):

    def __init__(self, tokens: List[str]):
        self._tokens = tokens

    def size(self) -> int:
        return len(self._tokens)

    def tokens(self, start: int, end: int) -> List[str]:
        if end < start:
            return []
        if start < 0 or end >= len(self._tokens):
            raise IndexError(f"positions {start}..{end} outside corpus of {len(self._tokens)} tokens")
        return self._tokens[start:end + 1]


class MemoryAlignment(AlignmentAttribute):

    def __init__(self, blocks: Optional[List[AlignmentBlock]] = None):
        self._blocks: List[Tuple[int, int, int, int]] = []
        for block in blocks or []:
            self.add(block)

    def add(self, block: AlignmentBlock):
        # Kept sorted by source position, as an indexed alignment would be
        insort(self._blocks, (block.source_start, block.source_end, block.target_start, block.target_end))

    def block_count(self) -> int:
        return len(self._blocks)

    def block(self, index: int) -> AlignmentBlock:
        return AlignmentBlock(*self._blocks[index])


class MemoryCorpus(Corpus):
    """Corpus held entirely in memory."""

    def __init__(self, name: str, words: Optional[List[str]] = None):
        self.name = name.upper()
        self.words: List[str] = list(words or [])
        # tu id -> (start, end) of the unit's tokens
        self.regions: Dict[str, Tuple[int, int]] = {}
        self.alignments: Dict[str, MemoryAlignment] = {}

    def add_region(self, key: str, tokens: List[str]):
        start = len(self.words)
        self.words.extend(tokens)
        self.regions[key] = (start, len(self.words) - 1)

    def attribute(self, name: str) -> PositionalAttribute:
        if name != "word":
            raise KeyError(f"Corpus [{self.name}] has no positional attribute [{name}]")
        return MemoryAttribute(self.words)

    def alignment(self, target: str) -> Optional[AlignmentAttribute]:
        return self.alignments.get(target.lower())


class MemoryRegistry(CorpusRegistry):

    def __init__(self):
        self.corpora: Dict[str, MemoryCorpus] = {}

    def add(self, corpus: MemoryCorpus):
        self.corpora[corpus.name] = corpus

    def open(self, name: str) -> Corpus:
        try:
            return self.corpora[name.upper()]
        except KeyError:
            raise CorpusNotFound(name) from None


class MemoryCorpusBuilder(CorpusBuilder):
    """Indexes staging files into a MemoryRegistry."""

    def __init__(self, registry: Optional[MemoryRegistry] = None):
        self.registry = registry or MemoryRegistry()

    def encode(self, staging_path, corpus_name: str) -> ToolResult:
        command = ["encode", str(staging_path), corpus_name]
        corpus = MemoryCorpus(corpus_name)
        try:
            for tu_id, tokens in read_blocks(staging_path):
                corpus.add_region(tu_key(tu_id), tokens)
        except (OSError, ValueError) as e:
            return ToolResult("encode", command, 1, stderr=str(e))
        self.registry.add(corpus)
        return ToolResult("encode", command, 0, stdout=f"{len(corpus.words)} tokens")

    def make(self, corpus_name: str) -> ToolResult:
        command = ["make", corpus_name]
        if corpus_name.upper() not in self.registry.corpora:
            return ToolResult("make", command, 1, stderr=f"corpus {corpus_name} is not encoded")
        return ToolResult("make", command, 0)

    def import_alignment(self, alignment_path, inverse: bool = False) -> ToolResult:
        step = "align-import-inverse" if inverse else "align-import"
        command = [step, str(alignment_path)]
        try:
            (source_name, target_name), pairs = read_alignment_map(alignment_path)
            source = self.registry.corpora[source_name.upper()]
            target = self.registry.corpora[target_name.upper()]
        except (OSError, ValueError) as e:
            return ToolResult(step, command, 1, stderr=str(e))
        except KeyError as e:
            return ToolResult(step, command, 1, stderr=f"unknown corpus {e}")

        if inverse:
            source, target = target, source
            pairs = [(target_key, source_key) for source_key, target_key in pairs]

        alignment = MemoryAlignment()
        for source_key, target_key in pairs:
            if source_key not in source.regions or target_key not in target.regions:
                return ToolResult(step, command, 1, stderr=f"unknown region {source_key}/{target_key}")
            alignment.add(AlignmentBlock(*source.regions[source_key], *target.regions[target_key]))

        source.alignments[target.name.lower()] = alignment
        return ToolResult(step, command, 0, stdout=f"{alignment.block_count()} alignments")
