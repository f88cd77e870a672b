from __future__ import annotations
import os, json
from datetime import datetime
from jinja2 import Environment, FileSystemLoader, select_autoescape
from .signals import DebtMap

JSON_REPORT = "debt-report.json"
MARKDOWN_REPORT = "DEBT_REPORT.md"


def render_markdown(debt_map: DebtMap) -> str:
    tmpl_dir = os.path.join(os.path.dirname(__file__), "templates")
    env = Environment(loader=FileSystemLoader(tmpl_dir), autoescape=select_autoescape())
    tmpl = env.get_template("report.md.j2")
    scanned_at = datetime.fromtimestamp(debt_map.scanned_at / 1000).strftime("%Y-%m-%d %H:%M:%S")
    return tmpl.render(scanned_at=scanned_at, **debt_map.to_dict())


def write_markdown(debt_map: DebtMap, repo_root: str) -> str:
    path = os.path.join(repo_root, MARKDOWN_REPORT)
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_markdown(debt_map))
    return path


def write_json(debt_map: DebtMap, repo_root: str) -> str:
    path = os.path.join(repo_root, JSON_REPORT)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(debt_map.to_dict(), f, indent=2)
    return path
