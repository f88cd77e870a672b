"""Version-control history lookups (blame, last commit) backed by the git CLI."""
from __future__ import annotations
import re, logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
from .signals import BlameEntry
from .utils import run, CommandError

logger = logging.getLogger(__name__)

HUNK_HEADER = re.compile(r"^([0-9a-f]{40}) (\d+) (\d+)")
UNCOMMITTED = "0" * 40

Runner = Callable[..., str]


def parse_porcelain(output: str) -> List[BlameEntry]:
    """Parse ``git blame --porcelain`` output into one entry per committed line.

    Author metadata is only printed the first time a commit shows up, so it is
    remembered per hash and replayed for later hunks of the same commit.
    """
    entries: List[BlameEntry] = []
    commits: Dict[str, Tuple[str, int]] = {}
    commit_hash = ""
    author: Optional[str] = None
    timestamp: Optional[int] = None
    line_no = 0
    emitted = False

    for raw in output.splitlines():
        if raw.startswith("\t"):
            continue
        m = HUNK_HEADER.match(raw)
        if m:
            commit_hash, line_no = m.group(1), int(m.group(3))
            author, timestamp, emitted = None, None, False
            if commit_hash in commits:
                author, timestamp = commits[commit_hash]
        elif raw.startswith("author "):
            author = raw[len("author "):]
        elif raw.startswith("author-time "):
            try:
                timestamp = int(raw[len("author-time "):]) * 1000
            except ValueError:
                continue
        else:
            continue

        if emitted or not (commit_hash and author is not None and timestamp is not None):
            continue
        commits.setdefault(commit_hash, (author, timestamp))
        emitted = True
        if commit_hash == UNCOMMITTED:
            continue
        entries.append(BlameEntry(line=line_no, author=author, timestamp=timestamp, commit_hash=commit_hash))
    return entries


class VersionHistoryProvider:
    """Answers blame and last-commit queries for one workspace.

    Blame results are cached per (file, commit) for the lifetime of the
    provider. Entries are inserted once and only ever dropped by
    :meth:`clear_cache`.
    """

    def __init__(self, repo_root: str, runner: Runner = run, timeout: float = 30):
        self.repo_root = repo_root
        self._run = runner
        self._timeout = timeout
        self._blame_cache: Dict[Tuple[str, str], Tuple[BlameEntry, ...]] = {}
        self._is_repo: Optional[bool] = None

    def _git(self, *args: str) -> str:
        return self._run(["git", *args], cwd=self.repo_root, timeout=self._timeout)

    def is_repository(self) -> bool:
        if self._is_repo is None:
            try:
                self._git("rev-parse", "--git-dir")
                self._is_repo = True
            except CommandError as e:
                logger.debug("%s is not a git repository: %s", self.repo_root, e)
                self._is_repo = False
        return self._is_repo

    def get_current_commit(self) -> str:
        if not self.is_repository():
            return ""
        try:
            return self._git("rev-parse", "HEAD").strip()
        except CommandError as e:
            logger.warning("Failed to get current commit SHA: %s", e)
            return ""

    def get_blame(self, file: str, commit_sha: str) -> List[BlameEntry]:
        key = (file, commit_sha)
        cached = self._blame_cache.get(key)
        if cached is not None:
            return list(cached)
        if not self.is_repository():
            return []
        try:
            output = self._git("blame", "--porcelain", "--", file)
        except CommandError as e:
            logger.debug("Failed to get blame for %s: %s", file, e)
            return []
        entries = tuple(parse_porcelain(output))
        # first writer wins; a racing duplicate computed the same thing
        return list(self._blame_cache.setdefault(key, entries))

    def last_modified(self, file: str) -> Optional[Tuple[str, datetime]]:
        """Hash and commit date of the most recent commit touching ``file``."""
        if not self.is_repository():
            return None
        try:
            out = self._git("log", "-1", "--format=%H%x09%cI", "--", file).strip()
        except CommandError as e:
            logger.debug("Failed to read history for %s: %s", file, e)
            return None
        if not out:
            return None
        commit_hash, _, date = out.partition("\t")
        try:
            return commit_hash, datetime.fromisoformat(date.strip())
        except ValueError:
            logger.debug("Unparseable commit date %r for %s", date, file)
            return None

    def clear_cache(self) -> None:
        self._blame_cache.clear()

    def cache_size(self) -> int:
        return len(self._blame_cache)
