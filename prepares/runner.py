"""
Prepare run orchestrator.

Discovers the routing files of a Rails project, parses each one and feeds
it to the route prepare pass. The route registry is owned here and shared
by every file of the run; each file is walked with a fresh scope stack.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .base import Route
from .config import PrepareConfig
from .registry import RouteRegistry
from .route_prepare import RoutePrepare
from .ruby_parser import RubyRoutesParser

logger = logging.getLogger("route_prepare.runner")


class RoutePrepareRunner:
    """
    Run the route prepare pass over one project.

    Features:
    - Routing file discovery (config/routes.rb, config/routes/**/*.rb)
    - Error isolation per file
    - Progress reporting
    """

    def __init__(self, target_path: str, config: Optional[PrepareConfig] = None,
                 registry: Optional[RouteRegistry] = None):
        self.target = Path(target_path)
        self.config = config or PrepareConfig.from_env()
        self.registry = registry if registry is not None else RouteRegistry()
        self.parser = RubyRoutesParser()
        self.prepare = RoutePrepare(self.registry)
        self.stats = {
            "files_prepared": 0,
            "files_skipped": 0,
            "files_errored": 0,
        }

    def should_ignore(self, path: Path) -> bool:
        """Check if path should be ignored."""
        try:
            parts = path.relative_to(self.target).parts
        except ValueError:
            parts = path.parts
        return any(part in self.config.ignore_dirs for part in parts)

    def _collect_files(self) -> List[Path]:
        """Collect routing files in discovery order, each once."""
        if self.target.is_file():
            return [self.target]

        found: List[Path] = []
        seen = set()
        for pattern in self.config.route_globs or self.prepare.interesting_files:
            for fp in sorted(self.target.glob(pattern)):
                if not fp.is_file() or fp in seen:
                    continue
                seen.add(fp)
                if self.should_ignore(fp):
                    self.stats["files_skipped"] += 1
                    continue
                found.append(fp)
        return found

    def prepare_file(self, fp: Path) -> List[Route]:
        """
        Prepare a single routing file with error isolation.
        Returns the routes it produced.
        """
        try:
            file_size_mb = fp.stat().st_size / (1024 * 1024)
            if file_size_mb > self.config.max_file_size_mb:
                logger.warning(f"Skipping large file {fp}: {file_size_mb:.1f}MB > {self.config.max_file_size_mb}MB")
                self.stats["files_skipped"] += 1
                return []

            with open(fp, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"File read error {fp}: {e}")
            self.stats["files_errored"] += 1
            return []

        return self.prepare_content(str(fp), content)

    def prepare_content(self, file_path: str, content: str) -> List[Route]:
        """Prepare routing source that is already in memory."""
        nodes = self.parser.parse(content, source_name=file_path)
        routes = self.prepare.process(nodes, file_path=file_path)
        self.stats["files_prepared"] += 1
        return routes

    def run(self, progress_cb: Optional[Callable[[int, int, Path], None]] = None) -> List[Route]:
        """Prepare every routing file of the target, in discovery order."""
        self.registry.reset()
        for key in self.stats:
            self.stats[key] = 0
        all_files = self._collect_files()
        if not all_files:
            logger.warning(f"No routing files found under {self.target}")

        for i, fp in enumerate(all_files):
            if progress_cb:
                progress_cb(i + 1, len(all_files), fp)
            self.prepare_file(fp)

        logger.info(f"Prepared {len(self.registry)} routes from {self.stats['files_prepared']} files")
        return self.all_routes()

    def all_routes(self) -> List[Route]:
        return self.registry.all()

    def summary(self) -> Dict[str, Any]:
        """Generate summary statistics."""
        by_controller: Dict[str, int] = {}
        for route in self.registry:
            name = route.controller.qualified_name
            by_controller[name] = by_controller.get(name, 0) + 1

        return {
            "total": len(self.registry),
            "files_prepared": self.stats["files_prepared"],
            "files_skipped": self.stats["files_skipped"],
            "files_errored": self.stats["files_errored"],
            "controllers": len(by_controller),
            "by_controller": by_controller,
            "wildcard": len([r for r in self.registry if r.is_wildcard]),
        }
