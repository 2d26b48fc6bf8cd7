import argparse
import json
import logging
import sys
from pathlib import Path

from pinguard.analyzer import analyze_file
from pinguard.config import load_config
from pinguard.project import analyze_project
from pinguard.report import capabilities_report, file_report, project_report
from pinguard.serialization import analysis_to_dict, project_to_dict

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pinguard",
        description="Static pin-conflict and resource checker for RBoard (PIC32MX170F256B) mruby sources",
    )
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("check", help="Analyze .rb files (directories are searched for *.rb)")
    c.add_argument("paths", nargs="+", help="Source files or directories")
    c.add_argument("--project", action="store_true", help="Treat all files as one program and report cross-file conflicts")
    c.add_argument("--json", action="store_true", help="Print results as JSON")
    c.add_argument("--max-response-ms", type=float, default=None, help="Real-time limit for any single delay")
    c.add_argument("--config", default=None, help="JSON file of analyzer config overrides")
    c.add_argument("--no-estimate", action="store_true", help="Only check pins; skip resource estimates")
    c.add_argument("--workers", type=int, default=None, help="Analyze project files on N threads")

    sub.add_parser("capabilities", help="List valid pins for every peripheral")

    sv = sub.add_parser("serve", help="Start the web API server")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    return p


def collect_sources(paths: list[str]) -> list[Path]:
    """Expand directories to their *.rb files (sorted); keep file paths as given."""
    sources: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            sources.extend(sorted(path.rglob("*.rb")))
        else:
            sources.append(path)
    return sources


def _check(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"pinguard: cannot load config {args.config}: {exc}", file=sys.stderr)
        return EXIT_USAGE

    sources = collect_sources(args.paths)
    if not sources:
        print("pinguard: no .rb files found", file=sys.stderr)
        return EXIT_USAGE

    estimate = not args.no_estimate
    if args.project:
        project = analyze_project(
            sources, config,
            max_workers=args.workers,
            estimate=estimate,
            max_response_ms=args.max_response_ms,
        )
        if args.json:
            print(json.dumps(project_to_dict(project), indent=2))
        else:
            print("\n".join(project_report(project)))
        return EXIT_VALID if project.valid else EXIT_INVALID

    results = [
        analyze_file(path, config, estimate=estimate, max_response_ms=args.max_response_ms)
        for path in sources
    ]
    if args.json:
        payload = [analysis_to_dict(r) for r in results]
        print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
    else:
        for r in results:
            print("\n".join(file_report(r)))
    return EXIT_VALID if all(r.valid for r in results) else EXIT_INVALID


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "check":
        return _check(args)

    if args.cmd == "capabilities":
        print("\n".join(capabilities_report()))
        return EXIT_VALID

    if args.cmd == "serve":
        from pinguard.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return EXIT_VALID

    return EXIT_USAGE
