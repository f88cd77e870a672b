from __future__ import annotations
import os, re, logging
from typing import Dict, Iterable, Set
from .utils import read_source

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
DEFAULT_EXTENSION = SOURCE_EXTENSIONS[0]

IMPORT_RE = re.compile(r"""(?:\bfrom\s+|\bimport\s*\(?\s*|\brequire\s*\(\s*)['"]([^'"]+)['"]""")


def normalize_import_path(from_file: str, import_path: str) -> str:
    """Resolve a relative import against the importing file's directory.

    Targets without a known source extension get ``DEFAULT_EXTENSION``
    appended; nothing is checked on disk.
    """
    parts = from_file.split("/")[:-1] + import_path.split("/")
    resolved = []
    for part in parts:
        if part == "..":
            if resolved:
                resolved.pop()
        elif part not in (".", ""):
            resolved.append(part)
    result = "/".join(resolved)
    if not result.endswith(SOURCE_EXTENSIONS):
        result += DEFAULT_EXTENSION
    return result


def extract_imports(content: str) -> Iterable[str]:
    for m in IMPORT_RE.finditer(content):
        yield m.group(1)


def build_import_graph(repo_root: str, files: Iterable[str]) -> Dict[str, int]:
    """Fan-in per resolved target: how many distinct files import it."""
    fan_in: Dict[str, int] = {}
    for file in files:
        if not file.endswith(SOURCE_EXTENSIONS):
            continue
        try:
            content = read_source(os.path.join(repo_root, file))
        except (OSError, ValueError) as e:
            logger.debug("Skipping %s in import graph: %s", file, e)
            continue
        targets: Set[str] = set()
        for target in extract_imports(content):
            if target.startswith("."):
                targets.add(normalize_import_path(file, target))
        for target in sorted(targets):
            fan_in[target] = fan_in.get(target, 0) + 1
    return fan_in
