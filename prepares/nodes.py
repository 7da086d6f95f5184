"""
Call-tree node model.

A typed view over a parsed routing file: every statement the recognizer
cares about is a Call, and call arguments are small literal value types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Sym:
    """Symbol literal (:posts, or the key in `only: [...]`)."""
    name: str


@dataclass(frozen=True)
class Str:
    """String literal. Interpolated strings keep their raw text."""
    value: str
    interpolated: bool = False


@dataclass(frozen=True)
class Regex:
    source: str


@dataclass(frozen=True)
class Ident:
    """Local variable, bare identifier or constant reference."""
    name: str


@dataclass(frozen=True)
class Other:
    """Any expression the recognizer has no use for (numbers, nil, ...)."""
    text: str


@dataclass
class ArrayLit:
    items: List[Any] = field(default_factory=list)


@dataclass
class HashLit:
    pairs: Dict[Any, Any] = field(default_factory=dict)


@dataclass
class Block:
    params: List[str] = field(default_factory=list)
    body: List["Call"] = field(default_factory=list)


@dataclass
class Call:
    """
    A method call: `receiver.name(args, options) do |params| body end`.

    `options` keeps every hash pair passed to the call in source order,
    keyed by Sym (keyword options) or Str (path mappings like
    `"/posts" => "posts#create"`).
    """
    name: str
    receiver: Optional[Any] = None
    args: List[Any] = field(default_factory=list)
    options: Dict[Any, Any] = field(default_factory=dict)
    block: Optional[Block] = None
    line: int = 0

    def keyword_options(self) -> Dict[str, Any]:
        """Options keyed by symbol name, in source order."""
        return {key.name: value for key, value in self.options.items() if isinstance(key, Sym)}

    def mapping(self) -> Optional[Tuple[Str, Any]]:
        """The first `"path" => target` pair, if the call has one."""
        for key, value in self.options.items():
            if isinstance(key, Str):
                return key, value
        return None

    def first_literal(self) -> Optional[str]:
        if not self.args:
            return None
        return literal(self.args[0])


def literal(value: Any) -> Optional[str]:
    """Plain text of a symbol or non-interpolated string, else None."""
    if isinstance(value, Sym):
        return value.name
    if isinstance(value, Str) and not value.interpolated:
        return value.value
    return None


def names_of(value: Any) -> Optional[List[str]]:
    """
    Normalize an option value to an ordered list of names.

    Accepts a single symbol/string, an array of them, or a `name => verb`
    hash (keys kept, verbs dropped). Returns None when the option is absent.
    """
    if value is None:
        return None
    if isinstance(value, ArrayLit):
        return [name for name in (literal(item) for item in value.items) if name]
    if isinstance(value, HashLit):
        return [name for name in (literal(key) for key in value.pairs) if name]
    name = literal(value)
    return [name] if name else []


def is_redirect(value: Any) -> bool:
    return isinstance(value, Call) and value.name == "redirect" and value.receiver is None
