from __future__ import annotations
from typing import Dict, List, Optional, Sequence
from .signals import DebtItem, DebtStats, HotFile, KINDS, SEVERITIES

SEVERITY_WEIGHTS = {"critical": 25, "high": 10, "medium": 5, "low": 2}
MAX_SCORE = 100
HOT_FILE_LIMIT = 10


def hot_file_score(items: Sequence[DebtItem]) -> int:
    return min(MAX_SCORE, sum(SEVERITY_WEIGHTS[it.severity] for it in items))


def calculate_stats(items: Sequence[DebtItem], fan_in: Optional[Dict[str, int]] = None) -> DebtStats:
    fan_in = fan_in or {}
    by_kind = {k: 0 for k in KINDS}
    by_severity = {s: 0 for s in SEVERITIES}
    by_file: Dict[str, List[DebtItem]] = {}

    for it in items:
        by_kind[it.kind] += 1
        by_severity[it.severity] += 1
        by_file.setdefault(it.file, []).append(it)

    ranked = [
        HotFile(
            file=file,
            score=hot_file_score(file_items),
            import_count=fan_in.get(file, 0),
            debt_items=tuple(file_items),
        )
        for file, file_items in by_file.items()
    ]
    # sorted() is stable, so equal scores keep first-seen order
    ranked = sorted(ranked, key=lambda hf: hf.score, reverse=True)

    return DebtStats(
        total_debt=len(items),
        by_kind=by_kind,
        by_severity=by_severity,
        hot_files=tuple(ranked[:HOT_FILE_LIMIT]),
    )
