"""
Shared data models and BasePrepare for the Rails route prepare pass.

All prepare modules import from this module.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


WILDCARD_ACTION = "*"
NAMESPACE_SEPARATOR = "::"
CONTROLLER_SUFFIX = "Controller"


# =============================================================================
# ENUMS
# =============================================================================

class ResourceKind(Enum):
    PLURAL = "resources"
    SINGULAR = "resource"


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class ControllerId:
    """Namespace-qualified controller name, e.g. Admin::Test::PostsController."""
    namespaces: Tuple[str, ...]
    name: str

    @property
    def qualified_name(self) -> str:
        return NAMESPACE_SEPARATOR.join(self.namespaces + (self.name + CONTROLLER_SUFFIX,))

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True)
class Route:
    """
    One reachable endpoint: a controller and an action.

    Only controller and action take part in equality; the source location
    is carried for reporting.
    """
    controller: ControllerId
    action: str
    file_path: Optional[str] = field(default=None, compare=False)
    line_number: int = field(default=0, compare=False)

    @property
    def is_wildcard(self) -> bool:
        return self.action == WILDCARD_ACTION

    def __str__(self) -> str:
        return f"{self.controller}#{self.action}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route": str(self),
            "controller": self.controller.qualified_name,
            "namespaces": list(self.controller.namespaces),
            "action": self.action,
            "file_path": self.file_path,
            "line_number": self.line_number,
        }


# =============================================================================
# BASE PREPARE (Abstract)
# =============================================================================

class BasePrepare(ABC):
    """
    Abstract base class for prepare passes.
    A prepare pass reads one kind of project file and records facts that
    later rule checks consume.
    """

    def __init__(self):
        self.stats = {"files_prepared": 0}

    @property
    @abstractmethod
    def interesting_files(self) -> List[str]:
        """Glob patterns, relative to the project root, this pass processes."""
        pass

    @abstractmethod
    def process(self, nodes: List[Any], file_path: Optional[str] = None) -> List[Route]:
        """Process a parsed call tree and return the routes it produced."""
        pass
