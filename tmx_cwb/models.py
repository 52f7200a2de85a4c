"""Data models for TMX/CWB conversion."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class LanguagePair:
    """Ordered (source, target) pair of language codes."""
    source: str
    target: str

    def __iter__(self):
        return iter((self.source, self.target))


@dataclass(frozen=True)
class AlignmentBlock:
    """Mutually aligned token spans, inclusive on both ends."""
    source_start: int
    source_end: int
    target_start: int
    target_end: int

    @property
    def source_span(self) -> Tuple[int, int]:
        return self.source_start, self.source_end

    @property
    def target_span(self) -> Tuple[int, int]:
        return self.target_start, self.target_end


@dataclass
class StagingFiles:
    """Paths of the three synchronized staging artifacts."""
    source: Path
    target: Path
    alignment: Path

    def all(self) -> List[Path]:
        return [self.source, self.target, self.alignment]


@dataclass
class ExportStatistics:
    """Counters collected while exporting translation units."""
    retained: int = 0
    skipped: int = 0

    @property
    def seen(self) -> int:
        return self.retained + self.skipped


@dataclass
class ToolResult:
    """Outcome of one external indexing step."""
    step: str
    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        """One-line summary for diagnostics."""
        detail = self.stderr.strip().splitlines()
        reason = detail[-1] if detail else f"exit status {self.returncode}"
        return f"{self.step} failed ({' '.join(self.command)}): {reason}"


@dataclass
class ConversionResult:
    """Result of a whole conversion run."""
    exit_code: int
    pair: Optional[LanguagePair] = None
    output_path: str = ""
    statistics: Dict[str, object] = field(default_factory=dict)
    steps: List[ToolResult] = field(default_factory=list)
