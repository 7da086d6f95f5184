#!/usr/bin/env python3
"""
Rails Route Prepare v1.0
========================
Static reconstruction of the controller#action table declared in a Rails
application's config/routes.rb, for both the Rails 2 (`map.resources`) and
Rails 3+ (`resources`) routing dialects.

Features:
  - resources/resource expansion with only/except/member/collection
  - namespace, scope, controller and with_options frames
  - direct verb routes, named routes, root, wildcard actions
  - redirects and the default catch-all route are recognized and skipped
  - Local directories, single routing files or Git URLs

Usage: python main.py [OPTIONS] <path>
"""

import sys
import os
import json
import argparse
import tempfile
import shutil
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

REQUIRED = {
    "rich": "rich>=13.7.0",
    "git": "gitpython>=3.1.40",
    "dotenv": "python-dotenv>=1.0.0",
    "yaml": "pyyaml>=6.0",
    "tree_sitter": "tree-sitter>=0.23.0",
    "tree_sitter_ruby": "tree-sitter-ruby>=0.23.0",
}

def check_deps():
    missing = []
    for mod, pkg in REQUIRED.items():
        try:
            __import__(mod)
        except ImportError:
            missing.append(pkg)
    if missing:
        print(f"\nMissing: pip install {' '.join(missing)}\n")
        sys.exit(1)

check_deps()

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich import box
from rich.logging import RichHandler
from dotenv import load_dotenv
import git

from prepares import PrepareConfig, Route, RoutePrepareRunner, __version__

console = Console()
err_console = Console(stderr=True)


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================
class JsonLinesFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(config: PrepareConfig) -> logging.Logger:
    """
    Attach handlers to the `route_prepare` logger tree.

    Console records go to stderr through rich so that `--format json`
    keeps stdout clean: warnings and up, or info and up when verbose.
    The optional log file receives every record as JSON lines.
    """
    logger = logging.getLogger("route_prepare")
    level = logging.DEBUG if config.verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(console=err_console, show_path=False, markup=False)
    console_handler.setLevel(logging.INFO if config.verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonLinesFormatter())
        logger.addHandler(file_handler)

    return logger


# =============================================================================
# OUTPUT FORMATTERS
# =============================================================================
def make_table(routes: List[Route], limit: int = 200) -> Table:
    t = Table(title=" Prepared Routes", box=box.ROUNDED, header_style="bold magenta")
    t.add_column("#", style="dim", width=5)
    t.add_column("Controller", style="cyan", max_width=50)
    t.add_column("Action", width=16)
    t.add_column("File:Line", style="dim", max_width=30)

    for i, route in enumerate(routes[:limit], 1):
        action = f"[yellow]{route.action}[/yellow]" if route.is_wildcard else route.action
        loc = f"{Path(route.file_path).name}:{route.line_number}" if route.file_path else "-"
        t.add_row(str(i), route.controller.qualified_name, action, loc)

    if len(routes) > limit:
        t.add_row("...", f"... +{len(routes) - limit} more", "", "")

    return t


def make_summary(s: Dict[str, Any]) -> Panel:
    txt = f"""
[bold cyan] Route Summary[/bold cyan]

[bold]Total Routes:[/bold] {s['total']}
[bold]Controllers:[/bold] {s['controllers']}
[bold]Wildcard Actions:[/bold] {s['wildcard']}
[bold]Files Prepared:[/bold] {s['files_prepared']} | Skipped: {s['files_skipped']} | Errored: {s['files_errored']}

[bold cyan]Top Controllers:[/bold cyan]
""" + "\n".join([f"   {k}: {v}" for k, v in sorted(s['by_controller'].items(), key=lambda x: -x[1])[:8]])

    return Panel(txt, border_style="cyan")


def build_report(routes: List[Route], summary: Dict[str, Any], target: str) -> Dict[str, Any]:
    return {
        "timestamp": datetime.now().isoformat(),
        "target": target,
        "version": __version__,
        "summary": summary,
        "routes": [r.to_dict() for r in routes],
    }


# =============================================================================
# GIT HELPER
# =============================================================================
def clone_repo(url: str) -> str:
    tmp = tempfile.mkdtemp(prefix="route_prepare_")
    console.print(f"[cyan]Cloning: {url}[/cyan]")
    git.Repo.clone_from(url, tmp, depth=1)
    console.print("[green] Cloned[/green]")
    return tmp


# =============================================================================
# MAIN CLI
# =============================================================================
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"Rails Route Prepare v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py ./my_rails_app                     # Route table for a project
  python main.py ./my_rails_app/config/routes.rb    # A single routing file
  python main.py ./my_rails_app -o routes.json      # Save JSON report
  python main.py ./my_rails_app --format json -q    # JSON to stdout
  python main.py https://github.com/org/app.git     # Clone and prepare
        """
    )

    # Target
    parser.add_argument("target", help="Rails project directory, routing file or Git URL")

    # Output options
    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument("-o", "--output", help="Output JSON file")
    output_group.add_argument("--format", choices=["table", "json"],
                              help="Console output format (default: table)")

    # Run options
    run_group = parser.add_argument_group("Run Options")
    run_group.add_argument("--config", metavar="FILE",
                           help="Configuration file (JSON or YAML)")
    run_group.add_argument("--max-file-size", type=int,
                           help="Max file size in MB to prepare (default: 10)")
    run_group.add_argument("--log-file", metavar="FILE",
                           help="Write JSON-lines debug log to file")

    # General
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    return parser


def main(argv: Optional[List[str]] = None):
    load_dotenv()
    args = build_parser().parse_args(argv)

    # Build configuration
    if args.config:
        config = PrepareConfig.from_file(args.config)
    else:
        config = PrepareConfig.from_env()

    # Override with CLI args
    if args.format:
        config.output_format = args.format
    if args.max_file_size is not None:
        config.max_file_size_mb = args.max_file_size
    if args.log_file:
        config.log_file = args.log_file
    config.verbose = config.verbose or args.verbose

    setup_logging(config)
    quiet = args.quiet or config.output_format == "json"

    if not quiet:
        console.print(Panel.fit(
            f"[bold cyan] Rails Route Prepare v{__version__}[/bold cyan]\n"
            "[dim]Rails 2 map.* | Rails 3+ resources | namespace | scope | with_options[/dim]",
            border_style="cyan"
        ))

    target = args.target
    tmp = None

    try:
        # Clone if URL
        if target.startswith(("http://", "https://", "git@")):
            tmp = clone_repo(target)
            target = tmp
        elif not os.path.exists(target):
            console.print(f"[red]Error: {target} not found[/red]")
            sys.exit(1)

        runner = RoutePrepareRunner(target, config)

        def progress_cb(cur, tot, fp):
            prog.update(task, completed=(cur / tot) * 100,
                        description=f"[cyan]{Path(fp).name[:25]}")

        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
                      BarColumn(), TextColumn("{task.percentage:>3.0f}%"),
                      console=console, disable=quiet) as prog:
            task = prog.add_task("[cyan]Preparing", total=100)
            routes = runner.run(progress_cb=progress_cb)

        summary = runner.summary()
        report = build_report(routes, summary, args.target)

        if config.output_format == "json":
            print(json.dumps(report, indent=2))
        elif not quiet:
            console.print(f"\n[green] Found {len(routes)} routes[/green]")
            console.print(make_summary(summary))
            if routes:
                console.print(make_table(routes))

        if args.output:
            with open(args.output, 'w') as f:
                json.dump(report, f, indent=2)
            if not quiet:
                console.print(f"\n[green] Saved: {args.output}[/green]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[red]Error: {e}[/red]")
        if config.verbose:
            console.print_exception()
        sys.exit(1)
    finally:
        if tmp and os.path.exists(tmp):
            shutil.rmtree(tmp, ignore_errors=True)

    if not quiet:
        console.print("\n[bold green] Complete![/bold green]")

    sys.exit(0)


if __name__ == "__main__":
    main()
