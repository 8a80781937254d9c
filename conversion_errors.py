# -*- coding: utf-8 -*-
from typing import Optional


class DocxConversionError(Exception):
    """Base error for the DOCX -> LaTeX pipeline."""
    pass


class DocxFormatError(DocxConversionError):
    """The input is not a readable ZIP container."""
    pass


class MissingPartError(DocxConversionError):
    """A required part is absent from the OpenXML package."""

    def __init__(self, part: str):
        self.part = part
        super().__init__(f"required part '{part}' not found in package")


class DocxParseError(DocxConversionError):
    """A part is malformed XML, or uses markup the reader refuses to guess at."""

    def __init__(self, part: str, message: str, path: Optional[str] = None):
        self.part = part
        self.path = path
        where = f"{part}:{path}" if path else part
        super().__init__(f"{where}: {message}")


class RenderError(DocxConversionError, TypeError):
    """The renderer was handed something that is not an XDOM node."""
    pass
