"""
File Source - Confined file reads for file-backed resources

Module: capabilities.file_source
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Text and binary reads below one content root
  - Per-segment path checks
  - Blocking I/O moved off the event loop

SECURITY NOTES:
- Every path segment comes from a client URI: empty, "." / ".." and
  segments containing a separator are refused before any filesystem access
- The resolved path must stay below the content root (symlinks included)
"""

import asyncio
import logging
from pathlib import Path
from typing import Union

from ..core.errors import InvalidArgumentsError

FORBIDDEN_SEGMENTS = ("", ".", "..")


class FileSource:
    """
    Read-only view of a content directory

    Layout used by the built-in resources:
        <root>/texts/<category>/<filename>
        <root>/logs/<filename>
        <root>/documents/<type>/<filename>
    """

    def __init__(self, root: Union[str, Path]):
        """
        Args:
            root: Content root directory
        """
        self.root = Path(root).resolve()
        self.logger = logging.getLogger("capabilities.file_source")

    def resolve(self, *segments: str) -> Path:
        """
        Build the path of a file below the root

        Raises:
            InvalidArgumentsError: If a segment could escape the root
        """
        for segment in segments:
            if (
                segment in FORBIDDEN_SEGMENTS
                or "/" in segment
                or "\\" in segment
                or "\x00" in segment
            ):
                raise InvalidArgumentsError(f"Invalid path segment: {segment!r}")

        path = self.root.joinpath(*segments).resolve()
        if not path.is_relative_to(self.root):
            self.logger.warning(f"Refused path outside content root: {path}")
            raise InvalidArgumentsError(f"Path escapes content root: {'/'.join(segments)}")
        return path

    async def read_text(self, *segments: str) -> str:
        """
        Read a UTF-8 text file

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = self.resolve(*segments)
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    async def read_bytes(self, *segments: str) -> bytes:
        """
        Read a binary file

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = self.resolve(*segments)
        return await asyncio.to_thread(path.read_bytes)

    def __repr__(self) -> str:
        return f"FileSource({self.root})"
