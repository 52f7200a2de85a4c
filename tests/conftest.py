"""Shared pytest fixtures for TMX/CWB tests.

Provides sample TMX documents, in-memory corpora and settings that keep
staging files inside the test's temporary folder.
"""

from pathlib import Path

import pytest

from tmx_cwb.config import ImportSettings, Settings
from tmx_cwb.corpus import MemoryCorpusBuilder
from tmx_cwb.main import TMXCWB

# ============================================================================
# Sample TMX documents
# ============================================================================

TWO_LANGUAGE_TMX = """<?xml version="1.0" encoding="UTF-8"?>
<tmx version="1.4">
  <header creationtool="test" creationtoolversion="1" datatype="plaintext"
          segtype="sentence" adminlang="en" srclang="*all*" o-tmf="plain text"/>
  <body>
    <tu>
      <tuv xml:lang="PT"><seg>O gato preto</seg></tuv>
      <tuv xml:lang="EN"><seg>The black cat</seg></tuv>
    </tu>
    <tu>
      <tuv xml:lang="PT"><seg>Mundo</seg></tuv>
    </tu>
    <tu>
      <tuv xml:lang="PT"><seg>Bom   dia</seg></tuv>
      <tuv xml:lang="EN"><seg>Good morning</seg></tuv>
    </tu>
    <tu>
      <tuv xml:lang="EN"><seg>Only English</seg></tuv>
    </tu>
    <tu>
      <tuv xml:lang="PT"><seg>Até logo</seg></tuv>
      <tuv xml:lang="EN"><seg>See you <bpt i="1">&lt;b&gt;</bpt>soon<ept i="1">&lt;/b&gt;</ept> &lt;3</seg></tuv>
    </tu>
  </body>
</tmx>
"""

THREE_LANGUAGE_TMX = """<?xml version="1.0" encoding="UTF-8"?>
<tmx version="1.4">
  <header creationtool="test" creationtoolversion="1" datatype="plaintext"
          segtype="sentence" adminlang="en" srclang="*all*" o-tmf="plain text"/>
  <body>
    <tu>
      <tuv xml:lang="PT"><seg>Olá</seg></tuv>
      <tuv xml:lang="EN"><seg>Hello</seg></tuv>
      <tuv xml:lang="FR"><seg>Bonjour</seg></tuv>
    </tu>
  </body>
</tmx>
"""


def write_tmx(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def two_language_tmx(tmp_path) -> Path:
    """TMX with PT/EN units, two of which miss one language."""
    return write_tmx(tmp_path / "sample-memory.tmx", TWO_LANGUAGE_TMX)


@pytest.fixture
def three_language_tmx(tmp_path) -> Path:
    return write_tmx(tmp_path / "three.tmx", THREE_LANGUAGE_TMX)


# ============================================================================
# Conversion fixtures
# ============================================================================


@pytest.fixture
def work_dir(tmp_path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def settings(work_dir) -> Settings:
    """Default settings with staging files written to a temporary folder."""
    return Settings(tmx2cwb=ImportSettings(work_dir=str(work_dir)))


@pytest.fixture
def memory_builder() -> MemoryCorpusBuilder:
    return MemoryCorpusBuilder()


@pytest.fixture
def converter(settings, memory_builder) -> TMXCWB:
    """Converter indexing into memory instead of running CWB tools."""
    return TMXCWB(settings=settings, registry=memory_builder.registry, builder=memory_builder)
