from __future__ import annotations
import hashlib
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Tuple

KINDS = ("todo", "complexity", "dep", "stale")
SEVERITIES = ("critical", "high", "medium", "low")


def fingerprint(*parts: Any) -> str:
    """Deterministic id for a debt item: the same key always hashes the same."""
    key = ":".join(str(p) for p in parts)
    return hashlib.md5(key.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class BlameEntry:
    line: int
    author: str
    timestamp: int  # commit time, ms since epoch
    commit_hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": self.line,
            "author": self.author,
            "timestamp": self.timestamp,
            "commitHash": self.commit_hash,
        }


@dataclass(frozen=True)
class DebtItem:
    id: str
    kind: str  # todo|complexity|dep|stale
    severity: str  # critical|high|medium|low
    file: str
    message: str
    line: Optional[int] = None
    author: Optional[str] = None
    age_in_days: Optional[int] = None
    last_commit: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "severity": self.severity,
            "file": self.file,
        }
        if self.line is not None:
            out["line"] = self.line
        out["message"] = self.message
        if self.author is not None:
            out["author"] = self.author
        if self.age_in_days is not None:
            out["ageInDays"] = self.age_in_days
        if self.last_commit is not None:
            out["lastCommit"] = self.last_commit
        return out


@dataclass(frozen=True)
class HotFile:
    file: str
    score: int
    import_count: int = 0
    debt_items: Tuple[DebtItem, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "score": self.score,
            "importCount": self.import_count,
            "debtItems": [it.to_dict() for it in self.debt_items],
        }


@dataclass(frozen=True)
class DebtStats:
    total_debt: int
    by_kind: Dict[str, int] = field(default_factory=dict)
    by_severity: Dict[str, int] = field(default_factory=dict)
    hot_files: Tuple[HotFile, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDebt": self.total_debt,
            "byKind": dict(self.by_kind),
            "bySeverity": dict(self.by_severity),
            "hotFiles": [hf.to_dict() for hf in self.hot_files],
        }


@dataclass(frozen=True)
class DebtMap:
    items: Tuple[DebtItem, ...]
    scanned_at: int  # ms since epoch
    commit_sha: str
    stats: DebtStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [it.to_dict() for it in self.items],
            "scannedAt": self.scanned_at,
            "commitSha": self.commit_sha,
            "stats": self.stats.to_dict(),
        }


def blame_index(entries: List[BlameEntry]) -> Dict[int, BlameEntry]:
    return {e.line: e for e in entries}
