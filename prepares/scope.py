"""Lexical scope frames for namespace / scope / with_options blocks."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .controllers import camelize_segments


class FrameKind(Enum):
    NAMESPACE = "namespace"
    SCOPE = "scope"
    WITH_OPTIONS = "with_options"


@dataclass(frozen=True)
class ScopeFrame:
    """
    One lexical frame.

    segment: controller prefix contributed by the frame ("admin",
             "api/v1"); None when the frame adds no prefix.
    defaults: options merged into nested calls.
    """
    kind: FrameKind
    segment: Optional[str] = None
    defaults: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def namespace(cls, name: str) -> "ScopeFrame":
        return cls(FrameKind.NAMESPACE, segment=name)

    @classmethod
    def scope(cls, module: Optional[str] = None, controller: Any = None) -> "ScopeFrame":
        defaults = {"controller": controller} if controller is not None else {}
        return cls(FrameKind.SCOPE, segment=module, defaults=defaults)

    @classmethod
    def with_options(cls, defaults: Dict[str, Any]) -> "ScopeFrame":
        return cls(FrameKind.WITH_OPTIONS, defaults=dict(defaults))


class ScopeStack:
    """
    LIFO stack of scope frames active at the current point of traversal.

    A frame is visible only to calls lexically inside its block.
    """

    def __init__(self):
        self._frames: List[ScopeFrame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, frame: ScopeFrame):
        self._frames.append(frame)

    def pop(self) -> ScopeFrame:
        return self._frames.pop()

    def reset(self):
        self._frames = []

    @contextmanager
    def pushed(self, frame: ScopeFrame) -> Iterator[ScopeFrame]:
        self.push(frame)
        try:
            yield frame
        finally:
            self.pop()

    def resolve_controller_prefix(self) -> List[str]:
        """Camelized prefix segments, outermost frame first."""
        prefix: List[str] = []
        for frame in self._frames:
            if frame.segment:
                prefix.extend(camelize_segments(frame.segment))
        return prefix

    def resolve_default_options(self, resources: bool = False) -> Dict[str, Any]:
        """
        Default options visible here; inner frames override outer ones.

        Resource declarations name their own controller, so they only see
        with_options defaults, never a scope's :controller.
        """
        merged: Dict[str, Any] = {}
        for frame in self._frames:
            if resources and frame.kind != FrameKind.WITH_OPTIONS:
                continue
            merged.update(frame.defaults)
        return merged
