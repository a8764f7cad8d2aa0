"""Git Gateway - reads the staging area through the git CLI."""

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from ux_commit_check.domain.entities import StagedFile
from ux_commit_check.domain.protocols import GitError, StagingAreaProtocol

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30


class GitGateway(StagingAreaProtocol):
    """Lists staged added/modified files with their working-tree text and staged diff."""

    def __init__(self, repo_path: Optional[str] = None) -> None:
        self._cwd = repo_path
        self._toplevel: Optional[Path] = None

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=GIT_TIMEOUT_SECONDS,
                check=False,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError) as e:
            raise GitError(f"'{' '.join(cmd)}' failed: {e}") from e
        if result.returncode != 0:
            raise GitError(f"'{' '.join(cmd)}' exited {result.returncode}: {result.stderr.strip()}")
        return result.stdout

    def toplevel(self) -> Path:
        """Absolute path of the repository's working tree."""
        if self._toplevel is None:
            self._toplevel = Path(self._run("rev-parse", "--show-toplevel").strip())
        return self._toplevel

    def staged_paths(self) -> List[str]:
        """Repo-relative paths of staged added or modified files."""
        output = self._run("-c", "core.quotePath=false", "diff", "--cached", "--name-only", "--diff-filter=AM")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def staged_diff(self, path: str) -> str:
        return self._run("diff", "--cached", "--", f":(top){path}")

    def staged_files(self, path_filter: Optional[Callable[[str], bool]] = None) -> List[StagedFile]:
        """StagedFiles for staged paths accepted by path_filter; unreadable files are logged and skipped."""
        root = self.toplevel()
        files: List[StagedFile] = []
        for path in self.staged_paths():
            if path_filter is not None and not path_filter(path):
                logger.debug("Not checking %s", path)
                continue
            try:
                text = (root / path).read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning("Cannot read staged file %s: %s", path, e)
                continue
            files.append(StagedFile(path=path, text=text, diff_text=self.staged_diff(path)))
        return files
