from __future__ import annotations
import os, re, logging
from typing import List, Optional, Sequence
from .signals import DebtItem, fingerprint, blame_index
from .utils import read_source, days_between

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("TODO", "FIXME", "HACK", "XXX", "TEMP")


def todo_severity(age_in_days: int) -> str:
    if age_in_days > 365:
        return "critical"
    if age_in_days > 180:
        return "high"
    if age_in_days > 30:
        return "medium"
    return "low"


def marker_regex(patterns: Sequence[str]) -> re.Pattern:
    # an empty alternative would match every line
    alternation = "|".join(re.escape(p) for p in patterns if p)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def scan_todos(
    repo_root: str,
    file: str,
    commit_sha: str,
    history,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    now: Optional[float] = None,
) -> List[DebtItem]:
    """One ``todo`` item per line carrying a debt marker, aged by blame."""
    if not any(patterns):
        return []
    try:
        txt = read_source(os.path.join(repo_root, file))
    except (OSError, ValueError) as e:
        logger.warning("Failed to analyze TODOs in %s: %s", file, e)
        return []

    regex = marker_regex(patterns)
    blame = blame_index(history.get_blame(file, commit_sha))
    items: List[DebtItem] = []

    for idx, line in enumerate(txt.split("\n")):
        if not regex.search(line):
            continue
        line_no = idx + 1
        entry = blame.get(line_no)
        # untracked lines count as brand new
        age = days_between(entry.timestamp, now) if entry else 0
        items.append(
            DebtItem(
                id=fingerprint(file, line_no, "todo"),
                kind="todo",
                severity=todo_severity(age),
                file=file,
                line=line_no,
                message=line.strip(),
                author=entry.author if entry else None,
                age_in_days=age,
                last_commit=entry.commit_hash if entry else None,
            )
        )
    return items
