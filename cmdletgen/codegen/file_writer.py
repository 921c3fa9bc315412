"""Writers for generated project files.

This module provides the Writer interface and two implementations: one that
writes files below an output directory and one that keeps them in memory.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from upath import UPath

from cmdletgen.exceptions import OutputError

logger = logging.getLogger(__name__)


class Writer(ABC):
    """Destination for generated files.

    Paths are relative to the writer's root and use forward slashes; a
    leading './' is ignored.
    """

    @abstractmethod
    def write(self, path: str, content: str, content_type: str | None = None) -> str:
        """Write ``content`` to ``path``.

        Args:
            path: Relative path of the file.
            content: File content.
            content_type: Kind of content, such as 'source-file-csharp'.

        Returns:
            Where the file ended up.
        """
        pass

    @staticmethod
    def normalize(path: str) -> str:
        parts = [p for p in path.replace('\\', '/').split('/') if p and p != '.']
        if any(p == '..' for p in parts):
            raise OutputError(path, ValueError('path escapes the output directory'))
        return '/'.join(parts)


class FileWriter(Writer):
    """Writes files below an output directory.

    Local files are written to a temporary file next to the target and then
    renamed over it, so a reader never sees a half-written file. Other
    filesystems supported by UPath are written directly.
    """

    def __init__(self, output_dir: str | Path | UPath):
        self.output_dir = UPath(output_dir)
        self._written_files: list[str] = []

    def write(self, path: str, content: str, content_type: str | None = None) -> str:
        target = self.output_dir / self.normalize(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if not target.protocol:
                self._replace(Path(str(target)), content)
            elif target.protocol in ('file', 'local'):
                self._replace(Path(target.path), content)
            else:
                target.write_text(content, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(target), e)

        self._written_files.append(str(target))
        logger.debug(f'Wrote {target} ({content_type or "unknown content"})')
        return str(target)

    def _replace(self, target: Path, content: str) -> None:
        fd, temp_path = tempfile.mkstemp(
            dir=target.parent, prefix=f'.{target.name}.', suffix='.tmp'
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
            os.replace(temp_path, target)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

    def get_written_files(self) -> list[str]:
        return self._written_files.copy()


class MemoryWriter(Writer):
    """Collects files in a dict, keyed by normalized path."""

    def __init__(self):
        self.files: dict[str, str] = {}
        self.content_types: dict[str, str | None] = {}

    def write(self, path: str, content: str, content_type: str | None = None) -> str:
        key = self.normalize(path)
        self.files[key] = content
        self.content_types[key] = content_type
        return key
