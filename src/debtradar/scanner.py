from __future__ import annotations
import os, logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional
from .config import Config
from .signals import DebtItem, DebtMap
from .history import VersionHistoryProvider
from .todos import scan_todos
from .complexity import scan_complexity
from .deps import scan_dependencies
from .imports import build_import_graph
from .staleness import scan_staleness
from .scoring import calculate_stats
from .utils import load_gitignore, iter_files, now_ms

logger = logging.getLogger(__name__)

SCAN_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".java", ".go", ".rs")
MAX_WORKERS = 20

NOT_A_REPO_NOTICE = "Git repository not detected. Some features will be disabled."

ProgressCallback = Callable[[int, int, str], None]


class WorkspaceNotFoundError(Exception):
    """Raised when there is no workspace directory to scan."""


def iter_source_files(repo_root: str, cfg: Config) -> List[str]:
    ignore = load_gitignore(repo_root)
    files = [rel for rel in iter_files(repo_root, ignore, list(cfg.exclude_globs)) if rel.endswith(SCAN_EXTENSIONS)]
    if len(files) > cfg.max_files_to_scan:
        logger.info("Scanning the first %d of %d files", cfg.max_files_to_scan, len(files))
        del files[cfg.max_files_to_scan:]
    return files


class Scanner:
    """Runs every analyzer over a workspace and folds the findings into a DebtMap.

    The scanner owns the history provider, so the blame cache lives as long as
    the scanner does. Call :meth:`clear_cache` to drop it.
    """

    def __init__(
        self,
        repo_root: str,
        history: Optional[VersionHistoryProvider] = None,
        on_notice: Optional[Callable[[str], None]] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.repo_root = repo_root
        self.history = history or VersionHistoryProvider(repo_root)
        self.on_notice = on_notice
        self.clock = clock
        self._noticed = False

    def clear_cache(self) -> None:
        self.history.clear_cache()

    def _commit(self) -> str:
        if not os.path.isdir(self.repo_root):
            raise WorkspaceNotFoundError(f"No workspace folder at {self.repo_root}")
        if self.history.is_repository():
            return self.history.get_current_commit()
        if not self._noticed:
            self._noticed = True
            logger.info(NOT_A_REPO_NOTICE)
            if self.on_notice:
                self.on_notice(NOT_A_REPO_NOTICE)
        return ""

    def _scan_one(self, file: str, commit_sha: str, cfg: Config, now: int) -> List[DebtItem]:
        items = scan_todos(self.repo_root, file, commit_sha, self.history, cfg.todo_patterns, now=now)
        items += scan_complexity(self.repo_root, file, commit_sha, self.history, cfg.complexity_thresholds, now=now)
        return items

    def scan_file(self, file: str, cfg: Config) -> List[DebtItem]:
        """Quick per-file scan: markers and complexity only."""
        commit_sha = self._commit()
        return self._scan_one(file, commit_sha, cfg, self.clock())

    def scan(self, cfg: Config, on_progress: Optional[ProgressCallback] = None) -> DebtMap:
        commit_sha = self._commit()
        now = self.clock()
        files = iter_source_files(self.repo_root, cfg)
        total = len(files)
        logger.info("Scanning %d files at %s", total, commit_sha or "<no commit>")

        per_file: Dict[int, List[DebtItem]] = {}
        processed = 0
        with ThreadPoolExecutor(max_workers=MAX_WORKERS) as executor:
            futures = {executor.submit(self._scan_one, f, commit_sha, cfg, now): i for i, f in enumerate(files)}
            for future in as_completed(futures):
                idx = futures[future]
                try:
                    per_file[idx] = future.result()
                except Exception:
                    logger.exception("Analyzer crashed on %s", files[idx])
                    per_file[idx] = []
                processed += 1
                if on_progress:
                    on_progress(processed, total, files[idx])

        items: List[DebtItem] = []
        for idx in range(total):
            items.extend(per_file[idx])

        items.extend(scan_dependencies(self.repo_root, cfg.audit_command))

        fan_in = build_import_graph(self.repo_root, files)
        items.extend(
            scan_staleness(
                files,
                fan_in,
                self.history,
                days_threshold=cfg.stale_days_threshold,
                import_threshold=cfg.stale_import_threshold,
                now=now,
            )
        )

        stats = calculate_stats(items, fan_in)
        return DebtMap(items=tuple(items), scanned_at=self.clock(), commit_sha=commit_sha, stats=stats)


def scan_repo(
    repo_root: str,
    cfg: Config,
    on_progress: Optional[ProgressCallback] = None,
    history: Optional[VersionHistoryProvider] = None,
) -> DebtMap:
    return Scanner(repo_root, history=history).scan(cfg, on_progress)
