"""
Styled block model shared by the letter builder and the DOCX encoder.

A letter is a sequence of sections, each a sequence of paragraphs made of
text runs. Formatting is limited to the named styles below so the encoder
never has to interpret arbitrary formatting.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class StyleSpec:
    bold: bool = False
    italic: bool = False
    underline: bool = False
    font_size: Optional[int] = None  # points; None keeps the document default


class RunStyle(enum.Enum):
    PLAIN = StyleSpec()
    BOLD = StyleSpec(bold=True)
    TITLE = StyleSpec(bold=True, underline=True, font_size=14)
    ACCEPTANCE = StyleSpec(bold=True, italic=True, underline=True)

    @property
    def spec(self) -> StyleSpec:
        return self.value


class Align(str, enum.Enum):
    LEFT = "left"
    CENTER = "center"


class Indent(int, enum.Enum):
    """Left indents in twips (1/20 pt)."""

    NONE = 0
    SIGNATURE = 500
    SUB_TERM = 1000


@dataclass(frozen=True)
class Run:
    text: str
    style: RunStyle = RunStyle.PLAIN


@dataclass(frozen=True)
class Paragraph:
    runs: Tuple[Run, ...] = ()
    align: Align = Align.LEFT
    indent: Indent = Indent.NONE

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)

    @property
    def is_spacer(self) -> bool:
        return not self.runs


@dataclass(frozen=True)
class Section:
    name: str
    paragraphs: Tuple[Paragraph, ...]


@dataclass(frozen=True)
class LetterDocument:
    title: str
    author: str
    sections: Tuple[Section, ...]

    @property
    def paragraphs(self) -> Iterator[Paragraph]:
        for section in self.sections:
            yield from section.paragraphs

    def section(self, name: str) -> Section:
        for s in self.sections:
            if s.name == name:
                return s
        raise KeyError(name)


def para(*runs: Run, align: Align = Align.LEFT, indent: Indent = Indent.NONE) -> Paragraph:
    return Paragraph(runs=tuple(runs), align=align, indent=indent)


def plain(text: str) -> Run:
    return Run(text, RunStyle.PLAIN)


def bold(text: str) -> Run:
    return Run(text, RunStyle.BOLD)


SPACER = Paragraph()
