from __future__ import annotations
import os, copy, logging, yaml
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

logger = logging.getLogger(__name__)

CONFIG_FILE = ".debtradar.yml"

DEFAULT_CONFIG = {
    "stale_days_threshold": 365,
    "stale_import_threshold": 5,
    "complexity_thresholds": {"low": 5, "medium": 10, "high": 15, "critical": 25},
    "todo_patterns": ["TODO", "FIXME", "HACK", "XXX", "TEMP"],
    "exclude_globs": ["**/node_modules/**", "**/dist/**", "**/.git/**"],
    "max_files_to_scan": 5000,
    "audit_command": ["npm", "audit", "--json"],
}


@dataclass(frozen=True)
class ComplexityThresholds:
    low: int = 5
    medium: int = 10
    high: int = 15
    critical: int = 25


@dataclass(frozen=True)
class Config:
    stale_days_threshold: int = 365
    stale_import_threshold: int = 5
    complexity_thresholds: ComplexityThresholds = field(default_factory=ComplexityThresholds)
    todo_patterns: Tuple[str, ...] = ("TODO", "FIXME", "HACK", "XXX", "TEMP")
    exclude_globs: Tuple[str, ...] = ("**/node_modules/**", "**/dist/**", "**/.git/**")
    max_files_to_scan: int = 5000
    audit_command: Tuple[str, ...] = ("npm", "audit", "--json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        merged = _merge(DEFAULT_CONFIG, data)
        return cls(
            stale_days_threshold=int(merged["stale_days_threshold"]),
            stale_import_threshold=int(merged["stale_import_threshold"]),
            complexity_thresholds=ComplexityThresholds(
                **{k: int(v) for k, v in merged["complexity_thresholds"].items()}
            ),
            todo_patterns=_string_list(merged, "todo_patterns"),
            exclude_globs=_string_list(merged, "exclude_globs"),
            max_files_to_scan=int(merged["max_files_to_scan"]),
            audit_command=_string_list(merged, "audit_command"),
        )


def _merge(base: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for k, v in user.items():
        if isinstance(merged.get(k), dict):
            if not isinstance(v, dict):
                raise ValueError(f"'{k}' must be a mapping, got {type(v).__name__}")
            merged[k].update(v)
        else:
            merged[k] = v
    return merged


def _string_list(merged: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = merged[key]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    if not all(isinstance(v, str) and v for v in value):
        raise ValueError(f"'{key}' must only contain non-empty strings")
    return tuple(value)


def load_config(repo_root: str) -> Config:
    path = os.path.join(repo_root, CONFIG_FILE)
    user: Dict[str, Any] = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            try:
                user = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.warning("Ignoring malformed %s: %s", path, e)
                user = {}
        if not isinstance(user, dict):
            logger.warning("Ignoring %s: expected a mapping at top level", path)
            user = {}
    try:
        return Config.from_dict(user)
    except (TypeError, ValueError) as e:
        logger.warning("Invalid values in %s (%s); using defaults", path, e)
        return Config()
