"""Spreadsheet document format.

::

    <?xml version='1.0' encoding='utf-8'?>
    <spreadsheet version="v1">
      <cell>
        <name>A1</name>
        <contents>=B1+2</contents>
      </cell>
    </spreadsheet>

Every failure is reported as :class:`SpreadsheetReadWriteError`.
"""

from __future__ import annotations

import logging
import os
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable

from cellgraph._errors import SpreadsheetReadWriteError

logger = logging.getLogger(__name__)

ROOT_TAG = "spreadsheet"
CELL_TAG = "cell"
NAME_TAG = "name"
CONTENTS_TAG = "contents"
VERSION_ATTR = "version"

# Anything outside the XML 1.0 Char production
_XML_INVALID_RE = re.compile(r"[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def write_document(
    filename: str | os.PathLike[str],
    version: str,
    cells: Iterable[tuple[str, str]],
) -> None:
    """Write ``(name, contents)`` pairs under a root carrying *version*.

    The document is fully serialized before *filename* is opened, so a
    failure never leaves a truncated file behind.
    """
    _check_text(filename, version)
    root = ET.Element(ROOT_TAG, {VERSION_ATTR: version})
    count = 0
    for name, contents in cells:
        _check_text(filename, name)
        _check_text(filename, contents)
        cell = ET.SubElement(root, CELL_TAG)
        ET.SubElement(cell, NAME_TAG).text = name
        ET.SubElement(cell, CONTENTS_TAG).text = contents
        count += 1
    ET.indent(root)
    try:
        data = ET.tostring(root, encoding="utf-8", xml_declaration=True)
    except (TypeError, ValueError) as exc:
        raise SpreadsheetReadWriteError(f"Cannot serialize spreadsheet: {exc}") from exc
    # A raw CR would be read back as LF
    data = data.replace(b"\r", b"&#13;")
    try:
        with open(os.fspath(filename), "wb") as fh:
            fh.write(data)
    except (OSError, TypeError) as exc:
        raise SpreadsheetReadWriteError(f"Cannot write spreadsheet to {filename!r}: {exc}") from exc
    logger.debug("Wrote %d cells to %s", count, filename)


def _check_text(filename: str | os.PathLike[str], text: str) -> None:
    m = _XML_INVALID_RE.search(text)
    if m is not None:
        raise SpreadsheetReadWriteError(
            f"Cannot write spreadsheet to {filename!r}: "
            f"character {m.group()!r} cannot be stored in XML"
        )


def _read_root(filename: str | os.PathLike[str]) -> ET.Element:
    try:
        root = ET.parse(os.fspath(filename)).getroot()
    except (OSError, TypeError, ET.ParseError) as exc:
        raise SpreadsheetReadWriteError(f"Cannot read spreadsheet {filename!r}: {exc}") from exc
    if root.tag != ROOT_TAG:
        raise SpreadsheetReadWriteError(
            f"{filename!r} is not a spreadsheet document (root element <{root.tag}>)"
        )
    return root


def read_version(filename: str | os.PathLike[str]) -> str:
    """Version label stored in the document at *filename*."""
    version = _read_root(filename).get(VERSION_ATTR)
    if version is None:
        raise SpreadsheetReadWriteError(f"{filename!r} has no version attribute")
    return version


def read_document(filename: str | os.PathLike[str]) -> tuple[str, list[tuple[str, str]]]:
    """Return ``(version, [(name, contents), ...])`` in document order."""
    root = _read_root(filename)
    version = root.get(VERSION_ATTR)
    if version is None:
        raise SpreadsheetReadWriteError(f"{filename!r} has no version attribute")

    cells: list[tuple[str, str]] = []
    for index, cell in enumerate(root.findall(CELL_TAG)):
        name = cell.find(NAME_TAG)
        contents = cell.find(CONTENTS_TAG)
        if name is None or contents is None:
            raise SpreadsheetReadWriteError(
                f"Cell #{index + 1} in {filename!r} needs both <{NAME_TAG}> and <{CONTENTS_TAG}>"
            )
        cells.append(((name.text or "").strip(), contents.text or ""))
    logger.debug("Read %d cells from %s", len(cells), filename)
    return version, cells
