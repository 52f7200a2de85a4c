"""Streaming TMX reader."""

from pathlib import Path
from typing import Dict, Iterator, List, Optional
from xml.etree import ElementTree as ET

from .errors import MalformedTMX

XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

# Inline elements holding native formatting codes rather than text
CODE_ELEMENTS = {"bpt", "ept", "it", "ph", "ut"}


def _local(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _text(elem) -> str:
    parts = [elem.text or ""]
    for child in elem:
        if _local(child.tag) not in CODE_ELEMENTS:
            parts.append(_text(child))
        parts.append(child.tail or "")
    return "".join(parts)


class TMXReader:
    """Reads translation units from a TMX file one at a time.

    Each call to ``translation_units()`` re-opens the file, so the
    sequence can be consumed several times but not rewound mid-stream.
    A document that is not well-formed raises MalformedTMX, possibly
    after some units were already yielded.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._languages: Optional[List[str]] = None

    def languages(self) -> List[str]:
        """Distinct language codes used by ``<tuv>`` elements, in order of first appearance.

        When the header ``srclang`` names one of them (ignoring case) that
        language is moved to the front.
        """
        if self._languages is None:
            srclang = None
            seen: Dict[str, None] = {}
            for event, elem in self._parse(("start", "end")):
                tag = _local(elem.tag)
                if event == "start" and tag == "header":
                    srclang = elem.get("srclang")
                elif event == "end" and tag == "tuv":
                    lang = self._language_of(elem)
                    if lang:
                        seen.setdefault(lang)
                elif event == "end" and tag == "tu":
                    elem.clear()

            languages = list(seen)
            if srclang and srclang != "*all*":
                declared = [lang for lang in languages if lang.lower() == srclang.lower()]
                languages = declared + [lang for lang in languages if lang not in declared]
            self._languages = languages
        return self._languages

    def translation_units(self) -> Iterator[Dict[str, str]]:
        """Yield every translation unit as a mapping of language to text.

        Variants without segment text are left out of the mapping.
        """
        for _, elem in self._parse(("end",)):
            if _local(elem.tag) != "tu":
                continue

            unit: Dict[str, str] = {}
            for tuv in elem:
                if _local(tuv.tag) != "tuv":
                    continue
                lang = self._language_of(tuv)
                text = self._segment_text(tuv)
                if lang and text is not None and text.strip():
                    unit[lang] = text

            elem.clear()
            yield unit

    def __iter__(self):
        return self.translation_units()

    def _parse(self, events):
        try:
            yield from ET.iterparse(str(self.path), events=events)
        except ET.ParseError as e:
            raise MalformedTMX(str(self.path), str(e)) from e

    @staticmethod
    def _language_of(tuv) -> Optional[str]:
        return tuv.get(XML_LANG) or tuv.get("lang")

    @staticmethod
    def _segment_text(tuv) -> Optional[str]:
        for child in tuv:
            if _local(child.tag) == "seg":
                return _text(child)
        return None
