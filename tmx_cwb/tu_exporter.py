"""Export of TMX translation units to corpus staging files."""

import sys
from pathlib import Path
from typing import Iterable, Mapping, TextIO, Tuple

from .errors import StagingIOFailure
from .models import ExportStatistics, LanguagePair, StagingFiles
from .staging import (
    corpus_name,
    escape_markup,
    format_alignment_header,
    format_alignment_line,
    format_block,
    staging_files,
)
from .tokenizer import WhitespaceTokenizer, get_tokenizer


class TUExporter:
    """Writes source/target staging files and the alignment map for a TU stream."""

    def __init__(
        self,
        corpus_base: str,
        tokenizer: str = "toktok",
        progress_interval: int = 1000,
        verbose: bool = False,
    ):
        """Initialize exporter.

        Args:
            corpus_base: Base name the two corpus names are derived from
            tokenizer: Name of the tokenizer used for sides flagged for tokenization
            progress_interval: Report progress every this many retained units
            verbose: Whether to print progress to stderr
        """
        self.corpus_base = corpus_base
        self.tokenizer_name = tokenizer
        self.progress_interval = progress_interval
        self.verbose = verbose
        self._tokenizer = None
        self._splitter = WhitespaceTokenizer()

    @property
    def tokenizer(self):
        # Loaded lazily: a run that tokenizes neither side never needs it
        if self._tokenizer is None:
            self._tokenizer = get_tokenizer(self.tokenizer_name)
        return self._tokenizer

    def export(
        self,
        units: Iterable[Mapping[str, str]],
        pair: LanguagePair,
        work_dir=".",
        tokenize_source: bool = False,
        tokenize_target: bool = False,
    ) -> Tuple[StagingFiles, ExportStatistics]:
        """Export units to the three staging files inside ``work_dir``.

        File names are derived from the corpus base and the language pair
        (see ``staging.staging_files``).

        A failure part way leaves an inconsistent set of files which the
        caller must discard; the export cannot be resumed.

        Raises:
            StagingIOFailure: If a staging file cannot be created or written
        """
        work_dir = Path(work_dir)
        files = staging_files(work_dir, self.corpus_base, pair.source, pair.target)

        try:
            work_dir.mkdir(parents=True, exist_ok=True)
            with open(files.source, "w", encoding="utf-8") as source_out, \
                    open(files.target, "w", encoding="utf-8") as target_out, \
                    open(files.alignment, "w", encoding="utf-8") as align_out:
                stats = self.write(
                    units, pair, source_out, target_out, align_out,
                    tokenize_source=tokenize_source,
                    tokenize_target=tokenize_target,
                )
        except OSError as e:
            raise StagingIOFailure(f"Can't write staging files in [{work_dir}]: {e}") from e

        return files, stats

    def write(
        self,
        units: Iterable[Mapping[str, str]],
        pair: LanguagePair,
        source_out: TextIO,
        target_out: TextIO,
        align_out: TextIO,
        tokenize_source: bool = False,
        tokenize_target: bool = False,
    ) -> ExportStatistics:
        """Write the staging records for ``units`` to three open streams.

        Identifiers start at 1 and advance only for units holding text in
        both languages, so the three outputs always enumerate the same ids.
        """
        source_lang, target_lang = pair
        stats = ExportStatistics()

        align_out.write(format_alignment_header(
            corpus_name(self.corpus_base, source_lang),
            corpus_name(self.corpus_base, target_lang),
        ))

        if self.verbose:
            print("Processing...", end="", file=sys.stderr)

        tu_id = 1
        for unit in units:
            if source_lang not in unit or target_lang not in unit:
                stats.skipped += 1
                continue

            source_tokens = self._tokens(escape_markup(unit[source_lang]), tokenize_source)
            target_tokens = self._tokens(escape_markup(unit[target_lang]), tokenize_target)

            align_out.write(format_alignment_line(tu_id))
            source_out.write(format_block(tu_id, source_tokens))
            target_out.write(format_block(tu_id, target_tokens))

            stats.retained += 1
            self._report(stats.retained)
            tu_id += 1

        for stream in (source_out, target_out, align_out):
            stream.flush()

        if self.verbose:
            print(f"\rProcessing... {stats.retained} translation units", file=sys.stderr)

        return stats

    def _tokens(self, text: str, tokenize: bool):
        if tokenize:
            return self.tokenizer.tokenize(text)
        return self._splitter.tokenize(text)

    def _report(self, retained: int):
        if not self.verbose or not self.progress_interval:
            return
        if retained % self.progress_interval == 0:
            print(f"\rProcessing... {retained} translation units", end="", file=sys.stderr)


def export_units(
    units: Iterable[Mapping[str, str]],
    pair: LanguagePair,
    corpus_base: str,
    work_dir=".",
    tokenize_source: bool = False,
    tokenize_target: bool = False,
    tokenizer: str = "toktok",
    verbose: bool = False,
) -> Tuple[StagingFiles, ExportStatistics]:
    """Convenience wrapper around ``TUExporter.export``."""
    exporter = TUExporter(corpus_base, tokenizer=tokenizer, verbose=verbose)
    return exporter.export(
        units, pair, work_dir,
        tokenize_source=tokenize_source,
        tokenize_target=tokenize_target,
    )
