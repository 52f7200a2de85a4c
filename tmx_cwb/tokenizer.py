"""Tokenization policies applied to segments before staging.

Every policy only inserts token boundaries: the tokens of a segment,
concatenated, give back the segment without its whitespace.
"""

import re
from typing import Dict, List, Type

from nltk.tokenize import TreebankWordTokenizer
from nltk.tokenize.toktok import ToktokTokenizer


class SplittingToktokTokenizer(ToktokTokenizer):
    """Toktok rules without the ones that rewrite characters.

    Toktok turns ``&`` into ``&amp;``, ``|`` into ``&#124;`` and tab into
    ``&#9;``, and its URL rule drops the character after ``://``.
    """

    TOKTOK_REGEXES = [
        (re.compile(r"\|"), " | ") if rule is ToktokTokenizer.PIPE else rule
        for rule in ToktokTokenizer.TOKTOK_REGEXES
        if rule not in (ToktokTokenizer.AMPERCENT, ToktokTokenizer.TAB, ToktokTokenizer.URL_FOE_3)
    ]


class WhitespaceTokenizer:
    """Splits only on runs of whitespace."""

    name = "whitespace"

    def tokenize(self, text: str) -> List[str]:
        return text.split()


class NLTKTokenizer:
    """Word tokenizer backed by an nltk tokenizer that needs no model data."""

    name = "toktok"
    backend: Type = SplittingToktokTokenizer

    def __init__(self):
        self._tokenizer = self.backend()

    def tokenize(self, text: str) -> List[str]:
        # nltk tokenizers expect a single line
        return [token for token in self._tokenizer.tokenize(" ".join(text.split())) if token]


class TreebankTokenizer(NLTKTokenizer):
    name = "treebank"
    backend = TreebankWordTokenizer

    def tokenize(self, text: str) -> List[str]:
        # tokenize() rewrites double quotes as `` and ''; spans keep the original characters
        line = " ".join(text.split())
        return [line[start:end] for start, end in self._tokenizer.span_tokenize(line)]


TOKENIZERS: Dict[str, type] = {
    WhitespaceTokenizer.name: WhitespaceTokenizer,
    NLTKTokenizer.name: NLTKTokenizer,
    TreebankTokenizer.name: TreebankTokenizer,
}


def get_tokenizer(name: str = "toktok"):
    """Instantiate a tokenizer by name.

    Raises:
        ValueError: If no tokenizer is registered under that name
    """
    try:
        return TOKENIZERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown tokenizer '{name}' (choose from: {', '.join(sorted(TOKENIZERS))})"
        ) from None
