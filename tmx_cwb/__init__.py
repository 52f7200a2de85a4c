"""TMX/CWB bridge.

Imports TMX translation memories into aligned IMS Open Corpus Workbench
corpora and exports aligned corpora back to TMX.
"""

__version__ = "0.3.0"

from .main import TMXCWB
from .models import ConversionResult, LanguagePair

__all__ = ["TMXCWB", "ConversionResult", "LanguagePair"]
