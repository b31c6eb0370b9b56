"""JSON input utilities for exported timeline files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class DocumentParseError(ValueError):
    """The input is not valid JSON or not a JSON object."""


def parse_document_text(text: str) -> dict[str, Any]:
    """Deserialize export text into a JSON object.

    Args:
        text: Whole file content.

    Returns:
        The top-level JSON object.

    Raises:
        DocumentParseError: If text is not valid JSON or the top level is not an object.
            The original decoder error is chained as __cause__.
    """

    try:
        doc = json.loads(text)
    except ValueError as exc:  # JSONDecodeError, or an integer over the digit limit
        logger.warning("JSON 解析失败：%s", exc)
        raise DocumentParseError(f"JSON 解析失败：{exc}") from exc

    if not isinstance(doc, dict):
        logger.warning("JSON 顶层不是对象：%s", type(doc).__name__)
        raise DocumentParseError(f"JSON 顶层必须是对象，实际是 {type(doc).__name__}")
    return doc


def read_document_text(path: str | Path) -> str:
    """Read an export file as text (UTF-8, BOM tolerated)."""

    return Path(path).read_text(encoding="utf-8-sig")


def read_document(path: str | Path) -> dict[str, Any]:
    """Read and deserialize an export file.

    Raises:
        OSError: If the file cannot be read.
        DocumentParseError: If the content is not UTF-8 text holding a JSON object.
    """

    try:
        text = read_document_text(path)
    except UnicodeDecodeError as exc:
        logger.warning("文件不是 UTF-8 编码：%s", path)
        raise DocumentParseError(f"文件不是 UTF-8 编码：{exc}") from exc
    return parse_document_text(text)
