"""Staging file format shared by the exporter and the corpus builders.

A staging file holds one block per translation unit::

    <tu id='1'>
    token
    token
    </tu>

The alignment map starts with a header naming both corpora and the
pairing attribute, followed by one ``id_N<TAB>id_N`` line per unit.
"""

import re
from pathlib import Path
from typing import Iterator, List, Tuple

from .models import StagingFiles

TU_STRUCTURE = "tu"
ID_KEY = "id_{id}"

SOURCE_STAGING = "source.cqp"
TARGET_STAGING = "target.cqp"
ALIGNMENT_MAP = "align.txt"

_BLOCK_START = re.compile(r"^<tu id='(\d+)'>$")
_BLOCK_END = "</tu>"


def escape_markup(text: str) -> str:
    """Replace the two characters reserved by the staging markup.

    Only ``<`` and ``>`` are touched; the substitutes carry no ``<`` or
    ``>`` themselves, so escaping twice changes nothing.
    """
    return text.replace("<", "&lt").replace(">", "&gt")


def corpus_name(base_name: str, language: str) -> str:
    """Registry/folder name of the corpus holding one language."""
    return f"{base_name}_{language}".lower()


def corpus_id(base_name: str, language: str) -> str:
    """Upper-cased corpus identifier as used by the query engine."""
    return corpus_name(base_name, language).upper()


def default_corpus_base(tmx_path) -> str:
    """Derive a corpus base name from a TMX file name."""
    return re.sub(r"[.-]", "_", Path(tmx_path).name)


def staging_files(work_dir, corpus_base: str, source_lang: str, target_lang: str) -> StagingFiles:
    """Paths of the three staging files of one import inside ``work_dir``.

    Names carry the corpus base and both languages, e.g.
    ``memory_pt_en.source.cqp``.
    """
    prefix = f"{corpus_name(corpus_base, source_lang)}_{target_lang.lower()}"
    work_dir = Path(work_dir)
    return StagingFiles(
        source=work_dir / f"{prefix}.{SOURCE_STAGING}",
        target=work_dir / f"{prefix}.{TARGET_STAGING}",
        alignment=work_dir / f"{prefix}.{ALIGNMENT_MAP}",
    )


def tu_key(tu_id: int) -> str:
    return ID_KEY.format(id=tu_id)


def format_block(tu_id: int, tokens: List[str]) -> str:
    """Render one translation unit as a staging block."""
    return f"<tu id='{tu_id}'>\n" + "\n".join(tokens) + "\n</tu>\n"


def format_alignment_header(source_corpus: str, target_corpus: str) -> str:
    return f"{source_corpus.upper()}\t{target_corpus.upper()}\t{TU_STRUCTURE}\t{ID_KEY}\n"


def format_alignment_line(tu_id: int) -> str:
    key = tu_key(tu_id)
    return f"{key}\t{key}\n"


def read_blocks(path) -> Iterator[Tuple[int, List[str]]]:
    """Yield ``(tu_id, tokens)`` for every block of a staging file.

    Raises:
        ValueError: If the file is not well-formed staging markup
    """
    current_id = None
    tokens: List[str] = []

    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, 1):
            line = line.rstrip("\n")
            match = _BLOCK_START.match(line)
            if match:
                if current_id is not None:
                    raise ValueError(f"{path}:{line_no}: nested <tu> block")
                current_id = int(match.group(1))
                tokens = []
            elif line == _BLOCK_END:
                if current_id is None:
                    raise ValueError(f"{path}:{line_no}: </tu> without opening block")
                yield current_id, tokens
                current_id = None
            elif current_id is None:
                if line.strip():
                    raise ValueError(f"{path}:{line_no}: token outside of a <tu> block")
            elif line:
                tokens.append(line)

    if current_id is not None:
        raise ValueError(f"{path}: unterminated <tu id='{current_id}'> block")


def read_alignment_map(path) -> Tuple[Tuple[str, str], List[Tuple[str, str]]]:
    """Parse an alignment map into its corpus header and key pairs."""
    with open(path, "r", encoding="utf-8") as f:
        header = f.readline().rstrip("\n").split("\t")
        if len(header) != 4:
            raise ValueError(f"{path}: malformed alignment header")
        pairs = []
        for line in f:
            line = line.rstrip("\n")
            if not line:
                continue
            source_key, target_key = line.split("\t")
            pairs.append((source_key, target_key))

    return (header[0], header[1]), pairs
