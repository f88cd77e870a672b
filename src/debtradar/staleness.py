from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from .signals import DebtItem, fingerprint
from .utils import days_between

logger = logging.getLogger(__name__)

CRITICAL_FAN_IN = 10


def stale_severity(age_in_days: int, fan_in: int, import_threshold: int) -> str:
    if age_in_days > 365 and fan_in >= CRITICAL_FAN_IN:
        return "critical"
    if age_in_days > 365 and fan_in >= import_threshold:
        return "high"
    if age_in_days > 180 and fan_in >= import_threshold:
        return "high"
    return "medium"


def _to_ms(when: datetime) -> float:
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.timestamp() * 1000


def scan_staleness(
    files: Iterable[str],
    fan_in: Dict[str, int],
    history,
    days_threshold: int = 365,
    import_threshold: int = 5,
    now: Optional[float] = None,
) -> List[DebtItem]:
    """Flag files nobody has touched for a long time that many files import."""
    items: List[DebtItem] = []
    for file in files:
        last = history.last_modified(file)
        if last is None:
            continue
        commit_hash, when = last
        age = days_between(_to_ms(when), now)
        if age < days_threshold:
            continue
        count = fan_in.get(file, 0)
        if count < import_threshold:
            continue
        items.append(
            DebtItem(
                id=fingerprint(file, "stale"),
                kind="stale",
                severity=stale_severity(age, count, import_threshold),
                file=file,
                message=f"File untouched for {age} days but imported by {count} files",
                age_in_days=age,
                last_commit=commit_hash,
            )
        )
    logger.debug("Staleness pass flagged %d files", len(items))
    return items
