from __future__ import annotations
import os, subprocess, logging
from datetime import datetime
from typing import List, Optional, Iterable
from pathspec import PathSpec

logger = logging.getLogger(__name__)

MS_PER_DAY = 1000 * 60 * 60 * 24


class CommandError(Exception):
    """An external command could not be run, timed out or exited non-zero."""


def find_repo_root(start: str) -> str:
    start = os.path.abspath(start)
    p = start
    while p and p != os.path.dirname(p):
        if os.path.exists(os.path.join(p, ".git")):
            return p
        p = os.path.dirname(p)
    return start


def load_gitignore(repo_root: str) -> PathSpec:
    path = os.path.join(repo_root, ".gitignore")
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            return PathSpec.from_lines("gitwildmatch", f)
    return PathSpec.from_lines("gitwildmatch", [])


def is_text(content: str) -> bool:
    return "\0" not in content[:2048]


def read_source(path: str) -> str:
    """Read a source file, raising ValueError for binary content."""
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        txt = f.read()
    if not is_text(txt):
        raise ValueError(f"{path} looks like a binary file")
    return txt


def iter_files(repo_root: str, ignore: PathSpec, excludes: List[str]) -> Iterable[str]:
    """Yield workspace-relative posix paths in a stable (sorted) walk order."""
    exclude_spec = PathSpec.from_lines("gitwildmatch", excludes or [])
    for root, dirs, files in os.walk(repo_root):
        dirs[:] = sorted(d for d in dirs if d != ".git")
        for name in sorted(files):
            rel = os.path.relpath(os.path.join(root, name), repo_root).replace(os.sep, "/")
            if ignore.match_file(rel) or exclude_spec.match_file(rel):
                continue
            yield rel


def run(cmd: List[str], cwd: Optional[str] = None, timeout: float = 30) -> str:
    try:
        res = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            check=False,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"{cmd[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise CommandError(f"{cmd[0]} could not be started: {e}") from e
    if res.returncode != 0:
        raise CommandError(f"{' '.join(cmd)} exited with {res.returncode}: {res.stderr.strip()}")
    return res.stdout


def now_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


def days_between(timestamp_ms: float, now: Optional[float] = None) -> int:
    """Whole days elapsed from a millisecond timestamp until ``now`` (ms)."""
    if now is None:
        now = now_ms()
    return int((now - timestamp_ms) // MS_PER_DAY)
