"""Markdown assembly — one section per file, contents in fenced blocks."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence

logger = logging.getLogger(__name__)


def assemble_document_sync(root: str, file_paths: Sequence[str]) -> str:
    """Concatenate files under *root* into a markdown document.

    Each file becomes a ``## <relative path>`` heading followed by a fenced
    block tagged with the file extension. A file that cannot be read is
    replaced by an error line; the rest of the document is still produced.
    """
    parts: list[str] = []
    total = len(file_paths)

    for index, file_path in enumerate(file_paths, start=1):
        relative = os.path.relpath(file_path, root)
        parts.append(f"## {relative}\n\n")
        try:
            with open(file_path, encoding="utf-8") as fh:
                content = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", file_path, exc)
            parts.append(f"Error reading file: {exc}\n\n")
            continue

        lang = os.path.splitext(file_path)[1].lstrip(".")
        parts.append(f"```{lang}\n{content}\n```\n\n")

        if index % 10 == 0 or index == total:
            logger.debug("Assembled %d/%d files (%d%%)", index, total, index * 100 // total)

    return "".join(parts)


async def assemble_document(root: str, file_paths: Sequence[str]) -> str:
    return await asyncio.to_thread(assemble_document_sync, root, list(file_paths))
