"""Version-control adapters used to look up the last commit touching a file set."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from .contracts import VcsKind

logger = logging.getLogger(__name__)


class VcsClient:
    kind: VcsKind = VcsKind.GIT

    def latest_commit_touching(self, paths: Sequence[str]) -> str | None:
        raise NotImplementedError


class GitVcsClient(VcsClient):
    """Runs `git log -1 --pretty=format:%h` for the given paths.

    Returns the abbreviated hash of the most recent commit touching any of the
    paths, or None when git reports nothing (untracked or missing paths, not a
    repository, git unavailable, timeout).
    """

    kind = VcsKind.GIT

    def __init__(
        self,
        repo_root: str | None = None,
        timeout_seconds: float | None = None,
        executable: str = "git",
    ) -> None:
        self.repo_root = repo_root
        self.timeout_seconds = timeout_seconds
        self.executable = executable

    def command(self, paths: Sequence[str]) -> list[str]:
        return [self.executable, "log", "-1", "--pretty=format:%h", "--", *paths]

    def latest_commit_touching(self, paths: Sequence[str]) -> str | None:
        command = self.command(paths)
        try:
            result = subprocess.run(
                command,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError:
            logger.warning("VCS command or repo root missing: %s cwd=%s", self.executable, self.repo_root)
            return None
        except subprocess.TimeoutExpired:
            logger.warning("VCS lookup timed out after %ss paths=%s", self.timeout_seconds, " ".join(paths))
            return None
        if result.returncode != 0:
            logger.debug("VCS lookup exit=%s paths=%s", result.returncode, " ".join(paths))
            return None
        commit_id = (result.stdout or "").strip()
        return commit_id or None
