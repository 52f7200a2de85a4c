"""Orchestration of the indexing steps for an aligned corpus pair."""

import sys
from typing import List

from .corpus import CorpusBuilder
from .errors import ExternalToolFailure
from .models import LanguagePair, StagingFiles, ToolResult
from .staging import corpus_name


def build_corpora(
    builder: CorpusBuilder,
    files: StagingFiles,
    corpus_base: str,
    pair: LanguagePair,
    verbose: bool = False,
) -> List[ToolResult]:
    """Index both staging files and import the alignment in both directions.

    Steps run strictly in order since each one reads what the previous
    ones produced. The first failing step aborts the build.

    Args:
        builder: Indexing backend
        files: Staging files written by the TU exporter
        corpus_base: Base name the corpus names derive from
        pair: Source and target languages
        verbose: Print each step to stderr

    Returns:
        Results of all steps, in execution order

    Raises:
        ExternalToolFailure: If any step fails
    """
    source_name = corpus_name(corpus_base, pair.source)
    target_name = corpus_name(corpus_base, pair.target)

    steps = [
        (f"Encoding {source_name}", lambda: builder.encode(files.source, source_name)),
        (f"Indexing {source_name}", lambda: builder.make(source_name)),
        (f"Encoding {target_name}", lambda: builder.encode(files.target, target_name)),
        (f"Indexing {target_name}", lambda: builder.make(target_name)),
        ("Importing alignment", lambda: builder.import_alignment(files.alignment)),
        ("Importing inverse alignment", lambda: builder.import_alignment(files.alignment, inverse=True)),
    ]

    results = []
    for label, step in steps:
        if verbose:
            print(f"  {label}...", file=sys.stderr)
        result = step()
        results.append(result)
        if not result.ok:
            raise ExternalToolFailure(result)

    return results
