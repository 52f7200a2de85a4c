"""Conversion orchestrator."""

import sys
import time
import traceback
from pathlib import Path
from typing import Optional

from .alignment_exporter import AlignmentExporter
from .builder import build_corpora
from .config import Settings, load_config
from .corpus import CorpusBuilder, CorpusRegistry
from .cwb import CWBCorpusBuilder, CWBRegistry, CWBTools, detect_registry
from .errors import CorporaFolderMissing, MissingCorpusName, TMXCWBError, TMXFileNotFound
from .language_detector import detect_languages
from .models import ConversionResult, LanguagePair
from .staging import corpus_id, default_corpus_base
from .tmx_reader import TMXReader
from .tmx_writer import TMXWriter
from .tu_exporter import TUExporter


class TMXCWB:
    """Converts TMX files to aligned CWB corpora and back."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        settings: Optional[Settings] = None,
        verbose: bool = False,
        registry: Optional[CorpusRegistry] = None,
        builder: Optional[CorpusBuilder] = None,
    ):
        """Initialize converter.

        Args:
            config_path: Path to config YAML file
            settings: Already loaded settings (takes precedence over config_path)
            verbose: Print progress to stderr
            registry: Corpus registry to export from (default: CWB registry)
            builder: Corpus builder to import with (default: CWB tools)
        """
        self.settings = settings or load_config(config_path)
        self.verbose = verbose
        self.registry = registry
        self.builder = builder

        cwb = self.settings.cwb
        self.tools = CWBTools(bin_dir=cwb.bin_dir, verbose=verbose, timeout=cwb.timeout)

    def _log(self, message: str):
        if self.verbose:
            print(message, file=sys.stderr)

    def _fail(self, error: TMXCWBError, **kwargs) -> ConversionResult:
        print(f"Error: {error}", file=sys.stderr)
        return ConversionResult(exit_code=error.exit_code, statistics={"error": str(error)}, **kwargs)

    def _crash(self, error: Exception, **kwargs) -> ConversionResult:
        print(f"Error: {type(error).__name__}: {error}", file=sys.stderr)
        if self.verbose:
            traceback.print_exc()
        return ConversionResult(exit_code=2, statistics={"error": str(error)}, **kwargs)

    def _corpus_builder(self, corpora: Optional[str], registry: Optional[str]) -> CorpusBuilder:
        if self.builder is not None:
            return self.builder

        corpora_dir = Path(corpora or self.settings.cwb.corpora)
        if not corpora_dir.is_dir():
            raise CorporaFolderMissing(str(corpora_dir))

        registry_dir = detect_registry(registry or self.settings.cwb.registry, self.tools)
        return CWBCorpusBuilder(registry_dir, corpora_dir, self.tools, charset=self.settings.cwb.charset)

    def _corpus_registry(self, registry: Optional[str]) -> CorpusRegistry:
        if self.registry is not None:
            return self.registry
        return CWBRegistry(detect_registry(registry or self.settings.cwb.registry, self.tools), self.tools)

    def to_cwb(
        self,
        tmx: str,
        from_lang: Optional[str] = None,
        to_lang: Optional[str] = None,
        corpus_name: Optional[str] = None,
        corpora: Optional[str] = None,
        registry: Optional[str] = None,
        tokenize_source: Optional[bool] = None,
        tokenize_target: Optional[bool] = None,
    ) -> ConversionResult:
        """Import a two-language TMX file as an aligned pair of corpora.

        Args:
            tmx: Path to the TMX file
            from_lang: Source language (guessed if the document has two languages)
            to_lang: Target language (guessed if the document has two languages)
            corpus_name: Corpus base name (default: derived from the file name)
            corpora: Folder for corpus data
            registry: Registry folder
            tokenize_source: Tokenize source segments instead of splitting on whitespace
            tokenize_target: Tokenize target segments instead of splitting on whitespace

        Returns:
            ConversionResult with exit code and statistics
        """
        options = self.settings.tmx2cwb
        if tokenize_source is None:
            tokenize_source = options.tokenize_source
        if tokenize_target is None:
            tokenize_target = options.tokenize_target

        start_time = time.time()
        pair = None
        try:
            if not Path(tmx).is_file():
                raise TMXFileNotFound(tmx)

            builder = self._corpus_builder(corpora, registry)
            reader = TMXReader(tmx)

            self._log("[1/3] Detecting languages...")
            pair = detect_languages(reader, from_lang, to_lang)
            self._log(f"  Using {pair.source} -> {pair.target}")

            base = corpus_name or default_corpus_base(tmx)

            self._log("[2/3] Writing staging files...")
            exporter = TUExporter(
                base,
                tokenizer=options.tokenizer,
                progress_interval=options.progress_interval,
                verbose=self.verbose,
            )
            files, stats = exporter.export(
                reader.translation_units(),
                pair,
                options.work_dir,
                tokenize_source=tokenize_source,
                tokenize_target=tokenize_target,
            )
            self._log(f"  Retained {stats.retained} of {stats.seen} translation units")

            self._log("[3/3] Building corpora...")
            steps = build_corpora(builder, files, base, pair, verbose=self.verbose)

            # Staging files survive a failed build for inspection
            if not options.keep_staging:
                for path in files.all():
                    path.unlink()

        except TMXCWBError as e:
            return self._fail(e, pair=pair)
        except Exception as e:
            return self._crash(e, pair=pair)

        execution_time = time.time() - start_time
        self._log(f"Conversion completed in {execution_time:.1f}s")

        return ConversionResult(
            exit_code=0,
            pair=pair,
            statistics={
                "source_corpus": corpus_id(base, pair.source),
                "target_corpus": corpus_id(base, pair.target),
                "translation_units": stats.retained,
                "skipped": stats.skipped,
                "execution_time": execution_time,
            },
            steps=steps,
        )

    def to_tmx(
        self,
        source: str,
        target: str,
        source_lang: str,
        target_lang: str,
        output: Optional[str] = None,
        registry: Optional[str] = None,
    ) -> ConversionResult:
        """Export an aligned pair of corpora as a TMX file.

        Args:
            source: Source corpus name
            target: Target corpus name
            source_lang: Language code written for source segments
            target_lang: Language code written for target segments
            output: Output TMX path (default: stdout)
            registry: Registry folder

        Returns:
            ConversionResult with exit code and statistics
        """
        options = self.settings.cwb2tmx
        pair = LanguagePair(source_lang, target_lang)

        start_time = time.time()
        try:
            if not source or not target:
                raise MissingCorpusName()

            exporter = AlignmentExporter(self._corpus_registry(registry), options.word_attribute)
            self._log(f"Exporting {source.upper()} -> {target.upper()}...")
            count = exporter.export(
                source, target, pair,
                TMXWriter(output),
                options.tool_name,
                options.tool_version,
            )

        except TMXCWBError as e:
            return self._fail(e, pair=pair)
        except Exception as e:
            return self._crash(e, pair=pair)

        execution_time = time.time() - start_time
        self._log(f"  Wrote {count} translation units in {execution_time:.1f}s")

        return ConversionResult(
            exit_code=0,
            pair=pair,
            output_path=str(output) if output else "",
            statistics={
                "translation_units": count,
                "execution_time": execution_time,
            },
        )
