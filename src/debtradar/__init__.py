"""Repository technical-debt scanner."""
from .config import Config, load_config
from .scanner import Scanner, WorkspaceNotFoundError, scan_repo
from .signals import DebtItem, DebtMap

__all__ = ["Config", "load_config", "Scanner", "WorkspaceNotFoundError", "scan_repo", "DebtItem", "DebtMap"]
__version__ = "0.1.0"
