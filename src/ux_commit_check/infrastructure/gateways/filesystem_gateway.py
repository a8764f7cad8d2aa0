"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import os
from pathlib import Path
from typing import List

from ux_commit_check.domain.constants import SEARCH_EXCLUDED_DIRS
from ux_commit_check.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def exists(self, path: str) -> bool:
        """True if path is an existing regular file."""
        return Path(path).is_file()

    def read_text(self, path: str) -> str:
        """Read a UTF-8 file; undecodable bytes are replaced."""
        return Path(path).read_text(encoding="utf-8", errors="replace")

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        Path(path).write_text(content, encoding=encoding)

    def search_files(
        self, root: str, suffixes: tuple[str, ...], name_prefixes: tuple[str, ...] = ()
    ) -> List[str]:
        """Recursive search under root, pruning node_modules/dist/build.

        A file matches when its suffix is in suffixes and, if name_prefixes is
        given, its lowercased name or any parent directory name starts with one
        of them (`api/user.ts` and `actions.js` match, `user.ts` does not).
        """
        found: List[str] = []
        if not Path(root).is_dir():
            return found
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in SEARCH_EXCLUDED_DIRS)
            parts = [p.lower() for p in Path(dirpath).relative_to(root).parts]
            for filename in sorted(filenames):
                if not filename.endswith(suffixes):
                    continue
                if name_prefixes and not self._name_matches(filename.lower(), parts, name_prefixes):
                    continue
                found.append(str(Path(dirpath) / filename))
        return found

    @staticmethod
    def _name_matches(filename: str, parents: List[str], prefixes: tuple[str, ...]) -> bool:
        if filename.startswith(prefixes):
            return True
        return any(part.startswith(prefixes) for part in parents)

    def collect_files(self, paths: List[str]) -> List[str]:
        """Expand directories recursively; files are kept as given. Order is stable."""
        collected: List[str] = []
        for raw in paths:
            path = Path(raw)
            if path.is_dir():
                for dirpath, dirnames, filenames in os.walk(path):
                    dirnames[:] = sorted(d for d in dirnames if d not in SEARCH_EXCLUDED_DIRS)
                    collected.extend(str(Path(dirpath) / f) for f in sorted(filenames))
            elif path.is_file():
                collected.append(str(path))
        return collected
