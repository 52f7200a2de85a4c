"""TMX 1.4 writer rendering jinja2 templates unit by unit."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional

from jinja2 import Environment


class TMXWriter:
    """Writes a TMX document incrementally.

    Usage::

        with TMXWriter("out.tmx") as writer:
            writer.begin("tmx-cwb", "0.3.0", srclang="pt")
            writer.add_tu({"pt": "Olá", "en": "Hello"})

    Leaving the ``with`` block ends the document, or aborts it when an
    exception is raised: a file the writer created is then removed.
    """

    HEADER_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<tmx version="1.4">
  <header creationtool="{{ tool_name }}" creationtoolversion="{{ tool_version }}" datatype="plaintext" segtype="sentence" adminlang="en" srclang="{{ srclang }}" o-tmf="plain text" creationdate="{{ creationdate }}"/>
  <body>
"""

    TU_TEMPLATE = """    <tu>
{%- for lang, text in variants %}
      <tuv xml:lang="{{ lang }}">
        <seg>{{ text }}</seg>
      </tuv>
{%- endfor %}
    </tu>
"""

    FOOTER_TEMPLATE = """  </body>
</tmx>
"""

    _env = Environment(autoescape=True, keep_trailing_newline=True)

    def __init__(self, output=None):
        """Initialize writer.

        Args:
            output: Output path, an open text stream, or None for stdout
        """
        self.output = output
        self._stream = None
        self._owns_stream = False
        self.units_written = 0

        self._header = self._env.from_string(self.HEADER_TEMPLATE)
        self._tu = self._env.from_string(self.TU_TEMPLATE)
        self._footer = self._env.from_string(self.FOOTER_TEMPLATE)

    def begin(self, tool_name: str, tool_version: str, srclang: Optional[str] = None):
        """Open the output and write the TMX header."""
        if self._stream is not None:
            raise RuntimeError("TMX document already started")

        if self.output is None:
            self._stream = sys.stdout
        elif hasattr(self.output, "write"):
            self._stream = self.output
        else:
            path = Path(self.output)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = open(path, "w", encoding="utf-8")
            self._owns_stream = True

        self._stream.write(self._header.render(
            tool_name=tool_name,
            tool_version=tool_version,
            srclang=srclang or "*all*",
            creationdate=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"),
        ))

    def add_tu(self, variants: Mapping[str, str]):
        """Append one translation unit (language -> text)."""
        if self._stream is None:
            raise RuntimeError("begin() must be called before add_tu()")
        self._stream.write(self._tu.render(variants=list(variants.items())))
        self.units_written += 1

    def end(self):
        """Close the document and release the output."""
        if self._stream is None:
            raise RuntimeError("begin() must be called before end()")
        self._stream.write(self._footer.render())
        self._stream.flush()
        if self._owns_stream:
            self._stream.close()
        self._stream = None
        self._owns_stream = False

    def abort(self):
        """Drop an unfinished document.

        Output files opened by the writer are closed and deleted; streams
        passed in keep whatever was already written.
        """
        if self._stream is None:
            return
        if self._owns_stream:
            self._stream.close()
            Path(self.output).unlink(missing_ok=True)
        self._stream = None
        self._owns_stream = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            if self._stream is not None:
                self.end()
        else:
            self.abort()
        return False
