"""Prepare run configuration: defaults, environment variables and JSON/YAML files."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import yaml


# =============================================================================
# CONFIGURATION - STRICT IGNORE PATTERNS
# =============================================================================
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Version control
    ".git", ".svn", ".hg", ".bzr",
    # Dependencies
    "node_modules", "vendor", ".bundle",
    # Rails build output
    "tmp", "log", "public", "coverage", ".cache",
    # IDE/OS
    ".idea", ".vscode", ".DS_Store",
}

DEFAULT_ROUTE_GLOBS: List[str] = ["config/routes.rb", "config/routes/**/*.rb"]

OUTPUT_FORMATS = ("table", "json")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class PrepareConfig:
    """
    Prepare run configuration with sensible defaults.
    Can be loaded from environment variables, config file, or CLI args.
    """
    # Discovery
    route_globs: List[str] = field(default_factory=lambda: list(DEFAULT_ROUTE_GLOBS))
    ignore_dirs: Set[str] = field(default_factory=set)
    max_file_size_mb: int = 10

    # Output options
    output_format: str = "table"  # table, json
    verbose: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Apply default ignore dirs if not set."""
        if not self.ignore_dirs:
            self.ignore_dirs = DEFAULT_IGNORE_DIRS.copy()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format '{self.output_format}', expected one of {OUTPUT_FORMATS}")

    @classmethod
    def from_env(cls) -> "PrepareConfig":
        """Load configuration from ROUTE_PREPARE_* environment variables."""
        globs = os.getenv("ROUTE_PREPARE_ROUTE_GLOBS")
        return cls(
            route_globs=[g.strip() for g in globs.split(",") if g.strip()] if globs else list(DEFAULT_ROUTE_GLOBS),
            max_file_size_mb=int(os.getenv("ROUTE_PREPARE_MAX_FILE_SIZE", 10)),
            output_format=os.getenv("ROUTE_PREPARE_OUTPUT_FORMAT", "table"),
            verbose=_env_flag("ROUTE_PREPARE_VERBOSE"),
            log_level=os.getenv("ROUTE_PREPARE_LOG_LEVEL", "INFO"),
            log_file=os.getenv("ROUTE_PREPARE_LOG_FILE"),
        )

    @classmethod
    def from_file(cls, path: str) -> "PrepareConfig":
        """Load configuration from JSON or YAML file."""
        with open(path, 'r') as f:
            if path.endswith(('.yaml', '.yml')):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        # Convert ignore_dirs list to set if present
        if 'ignore_dirs' in data and isinstance(data['ignore_dirs'], list):
            data['ignore_dirs'] = set(data['ignore_dirs'])

        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "route_globs": list(self.route_globs),
            "ignore_dirs": sorted(self.ignore_dirs),
            "max_file_size_mb": self.max_file_size_mb,
            "output_format": self.output_format,
            "verbose": self.verbose,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }
