import argparse, logging, os, sys
from .scanner import Scanner, WorkspaceNotFoundError
from .renderer import write_json, write_markdown
from .utils import find_repo_root
from .config import load_config


def print_summary(debt_map):
    stats = debt_map.stats
    print("=== Debt Radar Scan Complete ===")
    print(f"Commit: {debt_map.commit_sha or '(none)'}")
    print(f"Total debt items: {stats.total_debt}")
    print("\nBy Kind:")
    for kind, count in stats.by_kind.items():
        print(f"  {kind}: {count}")
    print("\nBy Severity:")
    for severity, count in stats.by_severity.items():
        print(f"  {severity}: {count}")
    print("\nHot Files (top 10):")
    for hf in stats.hot_files:
        print(f"  {hf.file} (score: {hf.score}, imported by {hf.import_count})")


def _progress(current, total, file):
    pct = current * 100 // total if total else 100
    print(f"\r[{pct:3d}%] {os.path.basename(file)[:60]:<60}", end="", file=sys.stderr, flush=True)
    if current == total:
        print(file=sys.stderr)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="debtradar", description="Technical debt radar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    scan = sub.add_parser("scan", help="Scan a repository")
    scan.add_argument("path", help="Path to repo (or any child path)")
    scan.add_argument("--markdown", action="store_true", help="Emit DEBT_REPORT.md")
    scan.add_argument("--json", action="store_true", help="Emit debt-report.json")
    scan.add_argument("--no-progress", action="store_true", help="Do not print per-file progress")

    scan_file = sub.add_parser("scan-file", help="Quick scan of a single file (markers and complexity)")
    scan_file.add_argument("path", help="Path to repo (or any child path)")
    scan_file.add_argument("file", help="File to scan, relative to the repo root")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not os.path.isdir(args.path):
        print(f"[error] No workspace folder at {args.path}", file=sys.stderr)
        return 2

    repo_root = find_repo_root(args.path)
    cfg = load_config(repo_root)
    scanner = Scanner(repo_root, on_notice=lambda msg: print(f"[info] {msg}", file=sys.stderr))

    try:
        if args.cmd == "scan-file":
            target = args.file if os.path.isabs(args.file) else os.path.join(repo_root, args.file)
            rel = os.path.relpath(target, repo_root).replace(os.sep, "/")
            for it in scanner.scan_file(rel, cfg):
                print(f"{it.file}:{it.line} [{it.severity}] {it.kind}: {it.message}")
            return 0
        debt_map = scanner.scan(cfg, on_progress=None if args.no_progress else _progress)
    except WorkspaceNotFoundError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    print_summary(debt_map)
    if args.json:
        print(f"Wrote {write_json(debt_map, repo_root)}")
    if args.markdown:
        print(f"Wrote {write_markdown(debt_map, repo_root)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
