"""
DOCX encoding of a `LetterDocument` using python-docx.
"""

from __future__ import annotations

import io
import logging

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, Twips

from loi_service.documents import Align, Indent, LetterDocument, Paragraph, Run, RunStyle
from loi_service.errors import EncodeError

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_ALIGNMENT = {
    Align.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Align.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
}


def _check_structure(document: LetterDocument) -> None:
    if not isinstance(document, LetterDocument):
        raise EncodeError("Invalid document", details=f"expected LetterDocument, got {type(document).__name__}")
    for pos, p in enumerate(document.paragraphs, start=1):
        if not isinstance(p, Paragraph):
            raise EncodeError("Invalid document", details=f"block {pos} is not a paragraph")
        if not isinstance(p.align, Align) or not isinstance(p.indent, Indent):
            raise EncodeError("Invalid document", details=f"block {pos} has unsupported layout")
        for r in p.runs:
            if not isinstance(r, Run) or not isinstance(r.text, str) or not isinstance(r.style, RunStyle):
                raise EncodeError("Invalid document", details=f"block {pos} has an invalid run")


def _emit(doc, p: Paragraph) -> None:
    out = doc.add_paragraph()
    if p.align is not Align.LEFT:
        out.alignment = _ALIGNMENT[p.align]
    if p.indent is not Indent.NONE:
        out.paragraph_format.left_indent = Twips(int(p.indent))
    for r in p.runs:
        spec = r.style.spec
        run = out.add_run(r.text)
        if spec.bold:
            run.bold = True
        if spec.italic:
            run.italic = True
        if spec.underline:
            run.underline = True
        if spec.font_size:
            run.font.size = Pt(spec.font_size)


def encode_docx(document: LetterDocument) -> bytes:
    """
    Serialize the letter to DOCX bytes.

    Core properties (title, author) are set before any paragraph is written.
    Raises EncodeError for an invalid block list or a python-docx failure.
    """
    _check_structure(document)
    try:
        doc = Document()
        props = doc.core_properties
        props.title = document.title
        props.author = document.author

        for p in document.paragraphs:
            _emit(doc, p)

        buffer = io.BytesIO()
        doc.save(buffer)
    except Exception as e:
        logger.exception("docx encode failed")
        raise EncodeError("Failed to generate DOCX", details=str(e)) from e
    return buffer.getvalue()
