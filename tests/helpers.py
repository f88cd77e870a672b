from datetime import datetime, timezone

from debtradar.signals import BlameEntry
from debtradar.utils import CommandError

NOW = 1_700_000_000_000
DAY_MS = 86_400_000


def days_ago(days: int) -> int:
    return NOW - days * DAY_MS


class StubHistory:
    """In-memory stand-in for VersionHistoryProvider.

    ``blame`` maps file -> {line: age_in_days}; ``modified`` maps
    file -> age_in_days of its last commit.
    """

    def __init__(self, blame=None, modified=None, repo=True, commit="a" * 40):
        self.blame = blame or {}
        self.modified = modified or {}
        self.repo = repo
        self.commit = commit
        self.blame_calls = []
        self.cleared = 0

    def is_repository(self):
        return self.repo

    def get_current_commit(self):
        return self.commit if self.repo else ""

    def get_blame(self, file, commit_sha):
        self.blame_calls.append((file, commit_sha))
        if not self.repo:
            return []
        return [
            BlameEntry(line=line, author="alice", timestamp=days_ago(age), commit_hash="b" * 40)
            for line, age in self.blame.get(file, {}).items()
        ]

    def last_modified(self, file):
        if not self.repo or file not in self.modified:
            return None
        when = datetime.fromtimestamp(days_ago(self.modified[file]) / 1000, tz=timezone.utc)
        return "c" * 40, when

    def clear_cache(self):
        self.cleared += 1


class FakeRunner:
    """Replays canned command output keyed by the joined argument list."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, cmd, cwd=None, timeout=30):
        self.calls.append(list(cmd))
        key = " ".join(cmd[1:])
        resp = self.responses.get(key)
        if resp is None:
            raise CommandError(f"unexpected command: {' '.join(cmd)}")
        if isinstance(resp, Exception):
            raise resp
        return resp
