#!/usr/bin/env python3
"""
Ruby Routes Parser
==================
Reads routing source text into the call-tree node model using tree-sitter.

Only what the route recognizer needs is converted:
- method calls (receiver, name, positional arguments, hash options, block)
- symbol / string / array / hash / regex literals
- identifiers and constants
Everything else becomes an opaque `Other` value.

Statements nested in if/unless/begin bodies are kept so that routes
declared conditionally (`if Rails.env.development?`) are still seen.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import tree_sitter_ruby
from tree_sitter import Language, Node, Parser

from .nodes import ArrayLit, Block, Call, HashLit, Ident, Other, Regex, Str, Sym

logger = logging.getLogger("route_prepare.parser")

RUBY_LANGUAGE = Language(tree_sitter_ruby.language())

# Nodes whose named children are statements
STATEMENT_CONTAINERS = {
    "program", "body_statement", "block_body", "begin", "then", "else",
    "parenthesized_statements", "ERROR",
}
CONDITIONALS = {"if", "unless", "elsif"}
CONDITIONAL_MODIFIERS = {"if_modifier", "unless_modifier"}
SKIPPED_ARGUMENTS = {"block_argument", "splat_argument", "hash_splat_argument", "comment"}


class RubyRoutesParser:
    """
    Parse routing files with the tree-sitter Ruby grammar.

    Usage:
        parser = RubyRoutesParser()
        calls = parser.parse(source)
    """

    def __init__(self):
        self._parser = Parser(RUBY_LANGUAGE)

    def parse(self, content: str, source_name: str = "<memory>") -> List[Call]:
        """Parse source text into top-level Call statements."""
        tree = self._parser.parse(content.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            logger.warning(f"Syntax errors in {source_name}, continuing with recovered tree")
        return list(self._collect(root))

    def parse_file(self, path: Path) -> List[Call]:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        return self.parse(content, source_name=str(path))

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def _collect(self, node: Node) -> Iterator[Call]:
        if node.type in ("call", "identifier"):
            call = self._call(node)
            if call is not None:
                yield call
        elif node.type in CONDITIONALS:
            for field_name in ("consequence", "alternative"):
                branch = node.child_by_field_name(field_name)
                if branch is not None:
                    yield from self._collect(branch)
        elif node.type in CONDITIONAL_MODIFIERS:
            body = node.child_by_field_name("body")
            if body is not None:
                yield from self._collect(body)
        elif node.type in STATEMENT_CONTAINERS:
            for child in node.named_children:
                yield from self._collect(child)

    def _call(self, node: Node) -> Optional[Call]:
        line = node.start_point[0] + 1
        if node.type == "identifier":
            return Call(name=self._text(node), line=line)

        method = node.child_by_field_name("method")
        if method is None:
            return None
        call = Call(name=self._text(method), line=line)

        receiver = node.child_by_field_name("receiver")
        if receiver is not None:
            call.receiver = self._value(receiver)

        arguments = node.child_by_field_name("arguments") or self._child_of_type(node, ("argument_list",))
        if arguments is not None:
            self._arguments(arguments, call)

        block = node.child_by_field_name("block") or self._child_of_type(node, ("do_block", "block"))
        if block is not None:
            call.block = self._block(block)
        return call

    def _arguments(self, arguments: Node, call: Call):
        children = [child for child in arguments.named_children if child.type not in SKIPPED_ARGUMENTS]
        for index, child in enumerate(children):
            if child.type == "pair":
                self._add_pair(child, call.options)
            elif child.type == "hash" and index == len(children) - 1:
                # trailing hash literal is the options hash
                for pair in child.named_children:
                    if pair.type == "pair":
                        self._add_pair(pair, call.options)
            else:
                call.args.append(self._value(child))

    def _block(self, node: Node) -> Block:
        block = Block()
        for child in node.named_children:
            if child.type == "block_parameters":
                block.params = [self._text(param) for param in child.named_children
                                if param.type == "identifier"]
            else:
                block.body.extend(self._collect(child))
        return block

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    def _value(self, node: Node) -> Any:
        node_type = node.type
        text = self._text(node)

        if node_type == "simple_symbol":
            return Sym(text.lstrip(":"))
        if node_type in ("hash_key_symbol", "bare_symbol"):
            return Sym(text)
        if node_type == "delimited_symbol":
            string = self._string(node)
            return Other(text) if string.interpolated else Sym(string.value)
        if node_type == "string":
            return self._string(node)
        if node_type == "bare_string":
            return Str(text)
        if node_type in ("array", "symbol_array", "string_array"):
            return ArrayLit([self._value(item) for item in node.named_children if item.type != "comment"])
        if node_type == "hash":
            pairs: Dict[Any, Any] = {}
            for pair in node.named_children:
                if pair.type == "pair":
                    self._add_pair(pair, pairs)
            return HashLit(pairs)
        if node_type == "regex":
            return Regex(text)
        if node_type in ("identifier", "constant", "scope_resolution"):
            return Ident(text)
        if node_type == "call":
            return self._call(node) or Other(text)
        if node_type == "parenthesized_statements" and node.named_child_count == 1:
            return self._value(node.named_children[0])
        return Other(text)

    def _string(self, node: Node) -> Str:
        parts = []
        interpolated = False
        for child in node.named_children:
            if child.type == "interpolation":
                interpolated = True
            parts.append(self._text(child))
        return Str("".join(parts), interpolated=interpolated)

    def _add_pair(self, pair: Node, target: Dict[Any, Any]):
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if key is None or value is None:
            return
        key_value = self._value(key)
        if not isinstance(key_value, (Sym, Str)):
            key_value = Other(self._text(key))
        target[key_value] = self._value(value)

    @staticmethod
    def _child_of_type(node: Node, types) -> Optional[Node]:
        for child in node.named_children:
            if child.type in types:
                return child
        return None

    @staticmethod
    def _text(node: Node) -> str:
        return node.text.decode("utf-8", errors="replace") if node.text else ""
