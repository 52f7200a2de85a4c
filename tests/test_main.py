"""Tests for the TMXCWB orchestrator, using in-memory corpora."""

import pytest

from tmx_cwb.config import ImportSettings, Settings
from tmx_cwb.corpus import MemoryAlignment, MemoryCorpus, MemoryCorpusBuilder
from tmx_cwb.main import TMXCWB
from tmx_cwb.models import AlignmentBlock, LanguagePair, ToolResult
from tmx_cwb.staging import staging_files
from tmx_cwb.tmx_reader import TMXReader


class FailingMakeBuilder(MemoryCorpusBuilder):
    """Builder whose indexing step always fails."""

    def make(self, corpus_name):
        return ToolResult("make", ["cwb-make", corpus_name], 1, stderr="cannot create index")


class TestRoundTrip:
    """TMX -> corpora -> TMX with in-memory indexing."""

    def test_pairs_survive_round_trip(self, converter, two_language_tmx, tmp_path):
        imported = converter.to_cwb(str(two_language_tmx), corpus_name="memory")
        assert imported.exit_code == 0

        output = tmp_path / "out.tmx"
        exported = converter.to_tmx("memory_pt", "memory_en", "PT", "EN", output=str(output))
        assert exported.exit_code == 0

        original = {
            (" ".join(unit["PT"].split()), " ".join(unit["EN"].split()))
            for unit in TMXReader(two_language_tmx)
            if "PT" in unit and "EN" in unit and "<" not in unit["EN"] + unit["PT"]
        }
        restored = {(unit["PT"], unit["EN"]) for unit in TMXReader(output)}

        assert original <= restored
        assert len(restored) == 3
        assert ("Até logo", "See you soon &lt3") in restored

    def test_inverse_alignment_is_installed(self, converter, memory_builder, two_language_tmx):
        converter.to_cwb(str(two_language_tmx), corpus_name="memory")

        target = memory_builder.registry.open("MEMORY_EN")
        assert target.alignment("memory_pt").block_count() == 3

    def test_reverse_direction_export(self, converter, two_language_tmx, tmp_path):
        converter.to_cwb(str(two_language_tmx), corpus_name="memory")
        output = tmp_path / "reverse.tmx"

        result = converter.to_tmx("memory_en", "memory_pt", "EN", "PT", output=str(output))

        assert result.exit_code == 0
        assert {"EN": "The black cat", "PT": "O gato preto"} in list(TMXReader(output))


class TestToCWB:
    """Tests for TMXCWB.to_cwb()."""

    def test_statistics_reported(self, converter, two_language_tmx):
        result = converter.to_cwb(str(two_language_tmx), corpus_name="memory")

        assert result.pair == LanguagePair("PT", "EN")
        assert result.statistics["source_corpus"] == "MEMORY_PT"
        assert result.statistics["target_corpus"] == "MEMORY_EN"
        assert result.statistics["translation_units"] == 3
        assert result.statistics["skipped"] == 2
        assert len(result.steps) == 6

    def test_corpus_base_defaults_to_file_name(self, converter, memory_builder, two_language_tmx):
        converter.to_cwb(str(two_language_tmx))

        assert "SAMPLE_MEMORY_TMX_PT" in memory_builder.registry.corpora
        assert "SAMPLE_MEMORY_TMX_EN" in memory_builder.registry.corpora

    def test_staging_files_removed_after_success(self, converter, two_language_tmx, work_dir):
        converter.to_cwb(str(two_language_tmx), corpus_name="memory")

        assert list(work_dir.iterdir()) == []

    def test_staging_files_kept_on_request(self, memory_builder, two_language_tmx, work_dir):
        settings = Settings(tmx2cwb=ImportSettings(work_dir=str(work_dir), keep_staging=True))
        converter = TMXCWB(settings=settings, registry=memory_builder.registry, builder=memory_builder)

        converter.to_cwb(str(two_language_tmx), corpus_name="memory")

        files = staging_files(work_dir, "memory", "PT", "EN")
        assert sorted(work_dir.iterdir()) == sorted(files.all())

    def test_failed_build_keeps_staging_files(self, settings, two_language_tmx, work_dir, capsys):
        converter = TMXCWB(settings=settings, builder=FailingMakeBuilder())

        result = converter.to_cwb(str(two_language_tmx), corpus_name="memory")

        assert result.exit_code == 2
        assert "cannot create index" in capsys.readouterr().err
        assert staging_files(work_dir, "memory", "PT", "EN").source.exists()

    def test_missing_tmx_file(self, converter, tmp_path, capsys):
        result = converter.to_cwb(str(tmp_path / "missing.tmx"))

        assert result.exit_code == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: Can't open")
        assert len(err.strip().splitlines()) == 1

    def test_malformed_tmx(self, converter, tmp_path, capsys):
        path = tmp_path / "broken.tmx"
        path.write_text('<tmx><body><tu><tuv xml:lang="PT"><seg>a</seg></tuv></body></tmx>')

        result = converter.to_cwb(str(path))

        assert result.exit_code == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: Can't parse")
        assert len(err.strip().splitlines()) == 1

    def test_unexpected_error_is_reported_on_one_line(self, settings, two_language_tmx, capsys):
        class BrokenBuilder(MemoryCorpusBuilder):
            def encode(self, staging_path, corpus_name):
                raise RuntimeError("disk on fire")

        result = TMXCWB(settings=settings, builder=BrokenBuilder()).to_cwb(str(two_language_tmx))

        assert result.exit_code == 2
        assert capsys.readouterr().err == "Error: RuntimeError: disk on fire\n"

    def test_ambiguous_languages(self, converter, three_language_tmx):
        assert converter.to_cwb(str(three_language_tmx)).exit_code == 1

    def test_hints_select_pair_from_three_languages(self, converter, memory_builder, three_language_tmx):
        result = converter.to_cwb(str(three_language_tmx), from_lang="FR", to_lang="PT", corpus_name="tri")

        assert result.exit_code == 0
        assert result.pair == LanguagePair("FR", "PT")
        assert "TRI_FR" in memory_builder.registry.corpora

    def test_unavailable_language(self, converter, two_language_tmx, capsys):
        result = converter.to_cwb(str(two_language_tmx), from_lang="DE")

        assert result.exit_code == 1
        assert "Language DE not available" in capsys.readouterr().err

    def test_missing_corpora_folder(self, settings, two_language_tmx, tmp_path):
        converter = TMXCWB(settings=settings)

        result = converter.to_cwb(str(two_language_tmx), corpora=str(tmp_path / "nowhere"))

        assert result.exit_code == 1
        assert "corpora folder" in result.statistics["error"]


class TestToTMX:
    """Tests for TMXCWB.to_tmx()."""

    def test_missing_corpus(self, converter, tmp_path):
        output = tmp_path / "out.tmx"

        result = converter.to_tmx("nothing_pt", "nothing_en", "PT", "EN", output=str(output))

        assert result.exit_code == 1
        assert not output.exists()

    def test_corpus_names_required(self, converter):
        assert converter.to_tmx("", "memory_en", "PT", "EN").exit_code == 1

    def test_writes_to_stdout_by_default(self, converter, two_language_tmx, capsys):
        converter.to_cwb(str(two_language_tmx), corpus_name="memory")

        result = converter.to_tmx("memory_pt", "memory_en", "PT", "EN")

        assert result.exit_code == 0
        assert result.statistics["translation_units"] == 3
        assert "<seg>O gato preto</seg>" in capsys.readouterr().out

    def test_same_language_on_both_sides(self, converter, two_language_tmx, tmp_path, capsys):
        converter.to_cwb(str(two_language_tmx), corpus_name="memory")
        output = tmp_path / "out.tmx"

        result = converter.to_tmx("memory_pt", "memory_en", "PT", "PT", output=str(output))

        assert result.exit_code == 1
        assert "must differ" in capsys.readouterr().err
        assert not output.exists()

    def test_failing_block_leaves_no_output(self, converter, memory_builder, tmp_path):
        source = MemoryCorpus("tiny_pt", ["gato"])
        target = MemoryCorpus("tiny_en", ["cat"])
        source.alignments["tiny_en"] = MemoryAlignment([AlignmentBlock(0, 0, 0, 0), AlignmentBlock(0, 5, 0, 0)])
        memory_builder.registry.add(source)
        memory_builder.registry.add(target)
        output = tmp_path / "out.tmx"

        result = converter.to_tmx("tiny_pt", "tiny_en", "PT", "EN", output=str(output))

        assert result.exit_code == 2
        assert not output.exists()
