# -*- coding: utf-8 -*-
"""
Read-only access to the parts of an OpenXML (.docx) package.
"""
import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, List, Union

from conversion_errors import DocxFormatError

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
FOOTNOTES_PART = "word/footnotes.xml"
ENDNOTES_PART = "word/endnotes.xml"
CORE_PROPS_PART = "docProps/core.xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"

PackageSource = Union[str, Path, bytes, BinaryIO]


class DocxPackage:
    """
    Zip accessor over a .docx: `exists(path)` / `read_text(path)` against the
    package-internal part names above. Accepts a path, raw bytes, or a binary
    file object.
    """

    def __init__(self, source: PackageSource):
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        self._source = source
        try:
            self._zip = zipfile.ZipFile(source, "r")
        except zipfile.BadZipFile as e:
            raise DocxFormatError(f"not a valid ZIP container: {e}")
        except FileNotFoundError:
            raise DocxFormatError(f"file not found: {source}")
        except OSError as e:
            # directories, permission errors
            raise DocxFormatError(f"cannot open package: {e}")
        self._names = set(self._zip.namelist())
        logger.debug(f"package opened: {len(self._names)} entries")

    def names(self) -> List[str]:
        return sorted(self._names)

    def exists(self, path: str) -> bool:
        return path in self._names

    def read_bytes(self, path: str) -> bytes:
        with self._zip.open(path) as fh:
            return fh.read()

    def read_text(self, path: str) -> str:
        return self.read_bytes(path).decode("utf-8")

    def close(self):
        self._zip.close()

    def __enter__(self) -> "DocxPackage":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
