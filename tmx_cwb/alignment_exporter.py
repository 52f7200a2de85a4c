"""Export of an aligned corpus pair back to TMX."""

from typing import Dict, Iterator

from .corpus import AlignmentAttribute, CorpusRegistry, PositionalAttribute
from .errors import AmbiguousLanguagePair, MissingAttribute, NoAlignmentData
from .models import LanguagePair
from .tmx_writer import TMXWriter


class AlignmentExporter:
    """Walks the alignment blocks between two corpora and rebuilds translation units."""

    def __init__(self, registry: CorpusRegistry, word_attribute: str = "word"):
        """Initialize exporter.

        Args:
            registry: Where corpora are opened by name
            word_attribute: Positional attribute holding surface strings
        """
        self.registry = registry
        self.word_attribute = word_attribute

    def translation_units(self, source: str, target: str, pair: LanguagePair) -> Iterator[Dict[str, str]]:
        """Return a lazy sequence of units, one per alignment block, in block order.

        Both corpora are opened and the alignment checked before the first
        unit is produced.

        Raises:
            AmbiguousLanguagePair: If both sides carry the same language code
            CorpusNotFound: If either corpus cannot be opened
            NoAlignmentData: If the alignment is missing or empty
            MissingAttribute: If a corpus has no word attribute
        """
        if pair.source == pair.target:
            raise AmbiguousLanguagePair(
                [pair.source],
                f"Source and target languages must differ (both are {pair.source})",
            )

        source_corpus = self.registry.open(source)
        target_corpus = self.registry.open(target)

        alignment = source_corpus.alignment(target.lower())
        if alignment is None or alignment.block_count() == 0:
            raise NoAlignmentData(source_corpus.name, target.lower())

        return self._walk(
            alignment,
            self._words(source_corpus),
            self._words(target_corpus),
            pair,
        )

    def _words(self, corpus) -> PositionalAttribute:
        try:
            return corpus.attribute(self.word_attribute)
        except KeyError:
            raise MissingAttribute(corpus.name, self.word_attribute) from None

    @staticmethod
    def _walk(
        alignment: AlignmentAttribute,
        source_words: PositionalAttribute,
        target_words: PositionalAttribute,
        pair: LanguagePair,
    ) -> Iterator[Dict[str, str]]:
        for index in range(alignment.block_count()):
            block = alignment.block(index)
            # Strings come decoded from the corpus; they are joined, never re-tokenized
            yield {
                pair.source: " ".join(source_words.tokens(*block.source_span)),
                pair.target: " ".join(target_words.tokens(*block.target_span)),
            }

    def export(
        self,
        source: str,
        target: str,
        pair: LanguagePair,
        writer: TMXWriter,
        tool_name: str,
        tool_version: str,
    ) -> int:
        """Write every aligned unit to ``writer``.

        If a block fails part way the writer discards what it wrote.

        Returns:
            Number of translation units written
        """
        units = self.translation_units(source, target, pair)

        count = 0
        with writer:
            writer.begin(tool_name, tool_version, srclang=pair.source)
            for unit in units:
                writer.add_tu(unit)
                count += 1

        return count
