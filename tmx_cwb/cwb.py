"""Adapter for the IMS Open Corpus Workbench (CWB).

Corpora are located through registry files, token strings are read with
``cwb-decode`` and alignment blocks straight from the ``.alx`` file of
the alignment attribute. Indexing shells out to ``cwb-encode``,
``cwb-make`` and ``cwb-align-import``.
"""

import os
import re
import struct
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .corpus import AlignmentAttribute, Corpus, CorpusBuilder, CorpusRegistry, PositionalAttribute
from .errors import CorpusNotFound, ExternalToolFailure, RegistryNotFound
from .models import AlignmentBlock, ToolResult
from .staging import TU_STRUCTURE

# (source_start, source_end, target_start, target_end), 32 bit network order
ALX_RECORD = struct.Struct(">4i")

CHARSETS = {
    "utf8": "utf-8",
    "latin1": "latin-1",
    "ascii": "ascii",
}


class CWBTools:
    """Runs CWB command-line programs and captures their outcome."""

    def __init__(self, bin_dir: Optional[str] = None, verbose: bool = False, timeout: Optional[int] = None):
        """Initialize runner.

        Args:
            bin_dir: Folder holding the CWB executables (default: PATH lookup)
            verbose: Echo each command to stderr before running it
            timeout: Optional per-command timeout in seconds
        """
        self.bin_dir = Path(bin_dir) if bin_dir else None
        self.verbose = verbose
        self.timeout = timeout

    def executable(self, program: str) -> str:
        if self.bin_dir:
            return str(self.bin_dir / program)
        return program

    def run(self, step: str, program: str, *args, encoding: str = "utf-8") -> ToolResult:
        """Run one program; never raises for tool errors."""
        command = [self.executable(program), *[str(arg) for arg in args]]
        if self.verbose:
            print(f"Running [{' '.join(command)}]", file=sys.stderr)

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                encoding=encoding,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError:
            return ToolResult(step, command, 127, stderr=f"{program}: command not found")
        except subprocess.TimeoutExpired:
            return ToolResult(step, command, 124, stderr=f"{program}: timed out after {self.timeout}s")

        return ToolResult(step, command, completed.returncode, completed.stdout, completed.stderr)

    def check(self, step: str, program: str, *args, encoding: str = "utf-8") -> ToolResult:
        """Run one program and raise if it fails."""
        result = self.run(step, program, *args, encoding=encoding)
        if not result.ok:
            raise ExternalToolFailure(result)
        return result


def detect_registry(explicit: Optional[str] = None, tools: Optional[CWBTools] = None) -> Path:
    """Locate the registry folder.

    Tries the explicit value, then ``CORPUS_REGISTRY``, then ``cwb-config -r``.

    Raises:
        RegistryNotFound: If none of them names an existing folder
    """
    registry = explicit or os.getenv("CORPUS_REGISTRY")
    if not registry:
        result = (tools or CWBTools()).run("cwb-config", "cwb-config", "-r")
        if result.ok:
            registry = result.stdout.strip()

    if not registry or not Path(registry).is_dir():
        raise RegistryNotFound()
    return Path(registry)


@dataclass
class RegistryEntry:
    """The parts of a registry file the adapter needs."""
    id: str
    home: Path
    charset: str = "latin1"
    attributes: List[str] = field(default_factory=list)
    structures: List[str] = field(default_factory=list)
    aligned: List[str] = field(default_factory=list)

    @property
    def encoding(self) -> str:
        return CHARSETS.get(self.charset, self.charset)


def read_registry_entry(path) -> RegistryEntry:
    """Parse a CWB registry file."""
    path = Path(path)
    entry = RegistryEntry(id=path.name, home=path.parent)

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            charset = re.match(r"##::\s*charset\s*=\s*\"?([\w-]+)\"?", line)
            if charset:
                entry.charset = charset.group(1)
                continue
            if not line or line.startswith("#"):
                continue

            keyword, _, value = line.partition(" ")
            value = value.strip().strip('"')
            if keyword == "ID":
                entry.id = value
            elif keyword == "HOME":
                entry.home = Path(value)
            elif keyword == "ATTRIBUTE":
                entry.attributes.append(value.split()[0])
            elif keyword == "STRUCTURE":
                entry.structures.append(value.split()[0])
            elif keyword == "ALIGNED":
                entry.aligned.append(value.split()[0])

    return entry


class CWBWordAttribute(PositionalAttribute):
    """Positional attribute decoded once with ``cwb-decode``."""

    def __init__(self, corpus: "CWBCorpus", name: str):
        self.corpus = corpus
        self.name = name
        self._tokens: Optional[List[str]] = None

    def _load(self) -> List[str]:
        if self._tokens is None:
            result = self.corpus.tools.check(
                "cwb-decode", "cwb-decode",
                "-C", "-r", self.corpus.registry_dir,
                self.corpus.name, "-P", self.name,
                encoding=self.corpus.entry.encoding,
            )
            # Compact output: one token per line
            self._tokens = result.stdout.split("\n")
            if self._tokens and self._tokens[-1] == "":
                self._tokens.pop()
        return self._tokens

    def size(self) -> int:
        return len(self._load())

    def tokens(self, start: int, end: int) -> List[str]:
        if end < start:
            return []
        tokens = self._load()
        if start < 0 or end >= len(tokens):
            raise IndexError(f"positions {start}..{end} outside corpus {self.corpus.name}")
        return tokens[start:end + 1]


class CWBAlignment(AlignmentAttribute):
    """Extended alignment attribute read from its ``.alx`` file."""

    def __init__(self, path: Path):
        self.path = path
        self._data = path.read_bytes()

    def block_count(self) -> int:
        return len(self._data) // ALX_RECORD.size

    def block(self, index: int) -> AlignmentBlock:
        if not 0 <= index < self.block_count():
            raise IndexError(f"alignment block {index} out of range")
        return AlignmentBlock(*ALX_RECORD.unpack_from(self._data, index * ALX_RECORD.size))


class CWBCorpus(Corpus):

    def __init__(self, entry: RegistryEntry, registry_dir: Path, tools: CWBTools):
        self.entry = entry
        self.name = entry.id.upper()
        self.registry_dir = registry_dir
        self.tools = tools

    def attribute(self, name: str) -> PositionalAttribute:
        if name not in self.entry.attributes:
            raise KeyError(f"Corpus [{self.name}] has no positional attribute [{name}]")
        return CWBWordAttribute(self, name)

    def alignment(self, target: str) -> Optional[AlignmentAttribute]:
        target = target.lower()
        path = self.entry.home / f"{target}.alx"
        if target not in self.entry.aligned or not path.is_file():
            return None
        return CWBAlignment(path)


class CWBRegistry(CorpusRegistry):
    """Opens corpora declared in a registry folder."""

    def __init__(self, registry_dir, tools: Optional[CWBTools] = None):
        self.registry_dir = Path(registry_dir)
        self.tools = tools or CWBTools()

    def open(self, name: str) -> Corpus:
        path = self.registry_dir / name.lower()
        if not path.is_file():
            raise CorpusNotFound(name, str(self.registry_dir))
        return CWBCorpus(read_registry_entry(path), self.registry_dir, self.tools)


class CWBCorpusBuilder(CorpusBuilder):
    """Indexes staging files with the CWB encoding tools."""

    def __init__(self, registry_dir, corpora_dir, tools: Optional[CWBTools] = None, charset: str = "utf8"):
        self.registry_dir = Path(registry_dir)
        self.corpora_dir = Path(corpora_dir)
        self.tools = tools or CWBTools()
        self.charset = charset

    def encode(self, staging_path, corpus_name: str) -> ToolResult:
        name = corpus_name.lower()
        folder = self.corpora_dir / name
        folder.mkdir(parents=True, exist_ok=True)
        return self.tools.run(
            f"encode {name}", "cwb-encode",
            "-c", self.charset,
            "-d", folder,
            "-f", staging_path,
            "-R", self.registry_dir / name,
            "-S", f"{TU_STRUCTURE}+id",
        )

    def make(self, corpus_name: str) -> ToolResult:
        return self.tools.run(
            f"make {corpus_name.lower()}", "cwb-make",
            "-r", self.registry_dir,
            "-V", corpus_name.upper(),
        )

    def import_alignment(self, alignment_path, inverse: bool = False) -> ToolResult:
        args = ["-r", self.registry_dir]
        if inverse:
            args.append("-inverse")
        args.append(alignment_path)
        step = "align-import inverse" if inverse else "align-import"
        return self.tools.run(step, "cwb-align-import", *args)
