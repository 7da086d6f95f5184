"""
Controller-Name Resolver
========================
Derives namespace-qualified controller ids from resource and route names.

    posts                  -> PostsController
    blog_posts             -> BlogPostsController
    high_voltage/pages     -> HighVoltage::PagesController
    posts + module "admin" -> Admin::PostsController
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from .base import ControllerId
from .nodes import literal

if TYPE_CHECKING:
    from .scope import ScopeStack

_SEGMENT_SPLIT = re.compile(r"/|::")


def camelize(word: str) -> str:
    """blog_posts -> BlogPosts. Already camelized words are left alone."""
    return "".join(part[:1].upper() + part[1:] for part in word.split("_") if part)


def camelize_segments(path: str) -> List[str]:
    """high_voltage/pages -> ["HighVoltage", "Pages"]"""
    return [camelize(part) for part in _SEGMENT_SPLIT.split(path) if part]


class ControllerNameResolver:
    """Resolve controller ids against the active scope stack."""

    def resolve(self, base_names: Sequence[str], options: Dict[str, Any],
                scopes: "ScopeStack") -> List[ControllerId]:
        """
        One ControllerId per base name.

        An explicit :controller option replaces every base name; an explicit
        :module option is appended after the scope prefix.
        """
        explicit = literal(options.get("controller"))
        module = literal(options.get("module"))
        resolved = []
        for name in base_names:
            controller_id = self.resolve_one(explicit or name, scopes, module)
            if controller_id is not None:
                resolved.append(controller_id)
        return resolved

    def resolve_one(self, name: str, scopes: "ScopeStack",
                    module: Optional[str] = None) -> Optional[ControllerId]:
        segments = camelize_segments(name)
        if not segments:
            return None
        prefix = scopes.resolve_controller_prefix()
        if module:
            prefix.extend(camelize_segments(module))
        prefix.extend(segments[:-1])
        return ControllerId(namespaces=tuple(prefix), name=segments[-1])
