"""
Prepare package for the Rails route prepare pass.

Exports the route recognizer, its collaborators and shared data models.
"""

from .base import (
    WILDCARD_ACTION,
    ResourceKind,
    ControllerId,
    Route,
    BasePrepare,
)

from .nodes import Sym, Str, Regex, Ident, Other, ArrayLit, HashLit, Block, Call
from .scope import FrameKind, ScopeFrame, ScopeStack
from .actions import ActionSetSynthesizer
from .controllers import ControllerNameResolver, camelize
from .registry import RouteRegistry
from .route_prepare import RoutePrepare
from .ruby_parser import RubyRoutesParser
from .config import PrepareConfig
from .runner import RoutePrepareRunner

__version__ = "1.0.0"

__all__ = [
    # Data models
    "WILDCARD_ACTION",
    "ResourceKind",
    "ControllerId",
    "Route",
    "BasePrepare",
    # Call tree
    "Sym",
    "Str",
    "Regex",
    "Ident",
    "Other",
    "ArrayLit",
    "HashLit",
    "Block",
    "Call",
    # Recognizer
    "FrameKind",
    "ScopeFrame",
    "ScopeStack",
    "ActionSetSynthesizer",
    "ControllerNameResolver",
    "camelize",
    "RouteRegistry",
    "RoutePrepare",
    # Run
    "RubyRoutesParser",
    "PrepareConfig",
    "RoutePrepareRunner",
]
