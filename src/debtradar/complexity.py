"""Heuristic cyclomatic complexity for brace-delimited JS/TS sources.

This is deliberately lexical: functions are found with a regex, their bodies
by brace counting, and decision points by token counting. ``else if`` is hit
by both the ``if`` and the ``else if`` pattern and therefore counts twice;
the default thresholds assume that.
"""
from __future__ import annotations
import os, re, logging
from dataclasses import dataclass
from typing import List, Optional
from .config import ComplexityThresholds
from .signals import DebtItem, fingerprint, blame_index
from .utils import read_source, days_between

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

FUNCTION_HEAD = re.compile(
    r"function\s+(\w+)"
    r"|(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?(?:function|\([^)]*\)\s*=>)"
    r"|(\w+)\s*\([^)]*\)\s*\{"
)

DECISION_POINTS = [
    re.compile(r"\bif\b"),
    re.compile(r"\belse\s+if\b"),
    re.compile(r"\bfor\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\bcase\b"),
    re.compile(r"\bcatch\b"),
    re.compile(r"&&"),
    re.compile(r"\|\|"),
    re.compile(r"\?"),
]


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    line: int
    body: str


def extract_functions(content: str) -> List[FunctionInfo]:
    functions: List[FunctionInfo] = []
    for m in FUNCTION_HEAD.finditer(content):
        name = m.group(1) or m.group(2) or m.group(3) or "anonymous"
        brace = content.find("{", m.start())
        if brace == -1:
            continue
        depth = 1
        end = brace + 1
        while depth > 0 and end < len(content):
            ch = content[end]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
            end += 1
        functions.append(
            FunctionInfo(name=name, line=content.count("\n", 0, m.start()) + 1, body=content[brace:end])
        )
    return functions


def cyclomatic_complexity(code: str) -> int:
    return 1 + sum(len(p.findall(code)) for p in DECISION_POINTS)


def complexity_severity(complexity: int, thresholds: ComplexityThresholds) -> str:
    if complexity >= thresholds.critical:
        return "critical"
    if complexity >= thresholds.high:
        return "high"
    if complexity >= thresholds.medium:
        return "medium"
    return "low"


def scan_complexity(
    repo_root: str,
    file: str,
    commit_sha: str,
    history,
    thresholds: ComplexityThresholds = ComplexityThresholds(),
    now: Optional[float] = None,
) -> List[DebtItem]:
    if not file.endswith(SOURCE_EXTENSIONS):
        return []
    try:
        content = read_source(os.path.join(repo_root, file))
    except (OSError, ValueError) as e:
        logger.warning("Failed to analyze complexity in %s: %s", file, e)
        return []

    functions = extract_functions(content)
    if not functions:
        return []
    blame = blame_index(history.get_blame(file, commit_sha))
    items: List[DebtItem] = []

    for fn in functions:
        score = cyclomatic_complexity(fn.body)
        if score < thresholds.low:
            continue
        entry = blame.get(fn.line)
        items.append(
            DebtItem(
                id=fingerprint(file, fn.line, "complexity"),
                kind="complexity",
                severity=complexity_severity(score, thresholds),
                file=file,
                line=fn.line,
                message=f"Function '{fn.name}' has cyclomatic complexity of {score}",
                author=entry.author if entry else None,
                age_in_days=days_between(entry.timestamp, now) if entry else None,
                last_commit=entry.commit_hash if entry else None,
            )
        )
    return items
