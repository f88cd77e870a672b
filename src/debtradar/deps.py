from __future__ import annotations
import os, json, logging
from typing import Any, Dict, List, Sequence
from .signals import DebtItem, fingerprint
from .utils import run, CommandError

logger = logging.getLogger(__name__)

MANIFEST = "package.json"
AUDIT_COMMAND = ("npm", "audit", "--json")
AUDIT_TIMEOUT = 10

SEVERITY_MAP = {"critical": "critical", "high": "high", "moderate": "medium", "low": "low"}


def map_audit_severity(severity: Any) -> str:
    return SEVERITY_MAP.get(str(severity or "").lower(), "low")


def parse_audit(payload: Dict[str, Any]) -> List[DebtItem]:
    """Map ``{vulnerabilities: {pkg: {severity, name, via: [{title}]}}}`` to items."""
    vulns = payload.get("vulnerabilities") or {}
    if not isinstance(vulns, dict):
        raise ValueError("'vulnerabilities' is not an object")
    items: List[DebtItem] = []
    for pkg, vuln in vulns.items():
        vuln = vuln if isinstance(vuln, dict) else {}
        title = "Vulnerability detected"
        # via may mix advisory objects with bare package names
        for via in vuln.get("via") or []:
            if isinstance(via, dict) and via.get("title"):
                title = via["title"]
                break
        items.append(
            DebtItem(
                id=fingerprint("dep", pkg, title),
                kind="dep",
                severity=map_audit_severity(vuln.get("severity")),
                file=MANIFEST,
                message=f"{pkg}: {title}",
            )
        )
    return items


def scan_dependencies(
    repo_root: str,
    command: Sequence[str] = AUDIT_COMMAND,
    timeout: float = AUDIT_TIMEOUT,
    runner=run,
) -> List[DebtItem]:
    if not os.path.exists(os.path.join(repo_root, MANIFEST)):
        return []
    try:
        out = runner(list(command), cwd=repo_root, timeout=timeout)
        payload = json.loads(out)
        if not isinstance(payload, dict):
            raise ValueError("audit output is not a JSON object")
        return parse_audit(payload)
    except CommandError as e:
        logger.warning("Dependency audit failed: %s", e)
    except ValueError as e:
        logger.warning("Dependency audit returned malformed output: %s", e)
    return []
