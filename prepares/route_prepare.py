"""
Route prepare: rebuilds the controller#action table from config/routes.rb.

Understands both routing dialects:

    # Rails 2
    ActionController::Routing::Routes.draw do |map|
      map.resources :posts, :member => { :publish => :put }
      map.namespace :admin do |admin|
        admin.resources :users
      end
      map.login '/login', :controller => 'sessions', :action => 'new'
    end

    # Rails 3+
    Blog::Application.routes.draw do
      resources :posts, only: [:index, :show] do
        get :search, on: :collection
      end
      scope module: "admin" do
        resources :users
      end
      get "/login" => "sessions#new"
    end
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .actions import ActionSetSynthesizer
from .base import BasePrepare, ControllerId, ResourceKind, Route, WILDCARD_ACTION
from .controllers import ControllerNameResolver
from .nodes import Block, Call, Ident, Regex, Str, Sym, is_redirect, literal, names_of
from .registry import RouteRegistry
from .scope import ScopeFrame, ScopeStack

logger = logging.getLogger("route_prepare.recognizer")

RESOURCE_CALLS = {"resources": ResourceKind.PLURAL, "resource": ResourceKind.SINGULAR}
VERB_CALLS = {"get", "post", "put", "patch", "delete", "match"}
LEGACY_VERB_CALLS = {"connect"}
EXTENSION_BLOCKS = {"member", "collection"}
# Reusable route templates, not routes themselves
IGNORED_BLOCK_CALLS = {"concern"}

CATCH_ALL_PLACEHOLDERS = {":controller", ":action", ":id", ":format"}
_PATH_TOKENS = re.compile(r"[/().]+")

# Raised while destructuring a call whose shape the grammar does not cover
SHAPE_ERRORS = (AttributeError, IndexError, KeyError, TypeError, ValueError)


@dataclass
class _ResourceContext:
    """An open resources/resource block collecting extension actions."""
    controllers: List[ControllerId]
    member: List[str] = field(default_factory=list)
    collection: List[str] = field(default_factory=list)
    on: Optional[str] = None


def _path_tokens(path: str) -> List[str]:
    return [token for token in _PATH_TOKENS.split(path) if token]


def _is_dynamic(segment: str) -> bool:
    return segment.startswith((":", "*"))


class RoutePrepare(BasePrepare):
    """
    Depth-first recognizer over a routing call tree.

    Each call is classified by its name, its argument shapes and whether it
    sits inside a resource block. Scope frames are pushed around namespace,
    scope, controller and with_options blocks and popped on exit.
    """

    def __init__(self, registry: Optional[RouteRegistry] = None):
        super().__init__()
        self.registry = registry if registry is not None else RouteRegistry()
        self.scopes = ScopeStack()
        self.resolver = ControllerNameResolver()
        self.stats["routes_emitted"] = 0
        self._resources: List[_ResourceContext] = []
        # Names yielded by enclosing blocks (`do |map|`, `do |admin|`)
        self._block_params: List[str] = []
        self._file_path: Optional[str] = None

    @property
    def interesting_files(self) -> List[str]:
        return ["config/routes.rb", "config/routes/**/*.rb"]

    def process(self, nodes: List[Any], file_path: Optional[str] = None) -> List[Route]:
        """Walk one file's calls and append its routes to the registry."""
        self.scopes.reset()
        self._resources = []
        self._block_params = []
        self._file_path = file_path
        start = len(self.registry)

        self._walk(nodes)

        emitted = self.registry.all()[start:]
        self.stats["files_prepared"] += 1
        logger.debug(f"Prepared {len(emitted)} routes from {file_path or '<memory>'}")
        return emitted

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def _walk(self, nodes: Sequence[Any]):
        for node in nodes:
            if not isinstance(node, Call):
                continue
            try:
                self._dispatch(node)
            except SHAPE_ERRORS as e:
                logger.debug(f"Ignoring unrecognized '{node.name}' call at line {node.line}: {e}")

    def _walk_block(self, block: Block):
        depth = len(self._block_params)
        self._block_params.extend(block.params)
        try:
            self._walk(block.body)
        finally:
            del self._block_params[depth:]

    def _dispatch(self, call: Call):
        name = call.name

        if name in RESOURCE_CALLS:
            self._on_resources(call, RESOURCE_CALLS[name])
        elif name == "namespace" and call.block:
            self._on_namespace(call)
        elif name == "scope" and call.block:
            self._on_scope(call)
        elif name == "controller" and call.block:
            self._on_controller(call)
        elif name == "with_options" and call.block:
            self._on_with_options(call)
        elif name in EXTENSION_BLOCKS and call.block and self._resources:
            self._on_extension_block(call)
        elif name in VERB_CALLS or name in LEGACY_VERB_CALLS:
            if not self._add_extension(call):
                self._on_verb(call)
        elif name == "root":
            self._on_root(call)
        elif name in IGNORED_BLOCK_CALLS:
            logger.debug(f"Skipping {name} block at line {call.line}")
        elif self._is_named_route(call):
            self._on_verb(call, legacy=True)
        elif call.block:
            self._walk_block(call.block)

    def _options_for(self, call: Call, resources: bool = False) -> Dict[str, Any]:
        """Call options merged over the defaults of the enclosing frames."""
        options = self.scopes.resolve_default_options(resources=resources)
        options.update(call.keyword_options())
        return options

    def _emit(self, controller: ControllerId, action: str, call: Call):
        route = Route(controller, action, file_path=self._file_path, line_number=call.line)
        self.registry.append(route)
        self.stats["routes_emitted"] += 1
        logger.debug(f"Route {route} (line {call.line})")

    def _emit_all(self, controllers: Sequence[ControllerId], actions: Sequence[str], call: Call):
        for controller in controllers:
            for action in actions:
                self._emit(controller, action, call)

    # -------------------------------------------------------------------------
    # Frames
    # -------------------------------------------------------------------------

    def _on_namespace(self, call: Call):
        name = call.first_literal()
        if not name:
            self._walk_block(call.block)
            return
        with self.scopes.pushed(ScopeFrame.namespace(name)):
            self._walk_block(call.block)

    def _on_scope(self, call: Call):
        options = call.keyword_options()
        frame = ScopeFrame.scope(module=literal(options.get("module")),
                                 controller=options.get("controller"))
        with self.scopes.pushed(frame):
            self._walk_block(call.block)

    def _on_controller(self, call: Call):
        controller = call.args[0] if call.args else None
        with self.scopes.pushed(ScopeFrame.scope(controller=controller)):
            self._walk_block(call.block)

    def _on_with_options(self, call: Call):
        with self.scopes.pushed(ScopeFrame.with_options(call.keyword_options())):
            self._walk_block(call.block)

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def _on_resources(self, call: Call, kind: ResourceKind):
        options = self._options_for(call, resources=True)
        names = [name for name in (literal(arg) for arg in call.args) if name]
        controllers = self.resolver.resolve(names, options, self.scopes)
        if not controllers:
            logger.debug(f"No resource name in '{call.name}' at line {call.line}")
            return

        only = names_of(options.get("only"))
        except_ = names_of(options.get("except"))
        context = _ResourceContext(
            controllers,
            member=names_of(options.get("member")) or [],
            collection=names_of(options.get("collection")) or [],
        )

        if call.block is None:
            actions = ActionSetSynthesizer.synthesize(kind, only, except_,
                                                      context.member, context.collection)
            self._emit_all(controllers, actions, call)
            return

        # Standard actions now, nested declarations next, extensions once the block closes
        self._emit_all(controllers, ActionSetSynthesizer.standard_actions(kind, only, except_), call)
        self._resources.append(context)
        try:
            self._walk_block(call.block)
        finally:
            self._resources.pop()
        extensions = ActionSetSynthesizer.extension_actions(context.member, context.collection)
        self._emit_all(controllers, extensions, call)

    def _on_extension_block(self, call: Call):
        context = self._resources[-1]
        previous = context.on
        context.on = call.name
        try:
            self._walk_block(call.block)
        finally:
            context.on = previous

    def _add_extension(self, call: Call) -> bool:
        """Record a verb inside a resource block as a member/collection action."""
        if not self._resources:
            return False
        action = self._extension_action(call)
        if action is None:
            return False

        context = self._resources[-1]
        on = literal(call.keyword_options().get("on")) or context.on
        if on == "collection":
            context.collection.append(action)
        else:
            context.member.append(action)
        return True

    @staticmethod
    def _extension_action(call: Call) -> Optional[str]:
        """Bare action name of a verb call, None when it names its own target."""
        options = call.keyword_options()
        if "to" in options or "controller" in options:
            return None

        mapping = call.mapping()
        if mapping is not None:
            target = mapping[1]
            return target.name if isinstance(target, Sym) else None

        action = literal(options.get("action")) or call.first_literal()
        if not action:
            return None
        action = action.strip("/")
        if not action or "/" in action or _is_dynamic(action):
            return None
        return action

    # -------------------------------------------------------------------------
    # Direct routes
    # -------------------------------------------------------------------------

    def _is_named_route(self, call: Call) -> bool:
        """`map.login '/login', ...`: any other method on a block parameter."""
        return (isinstance(call.receiver, Ident)
                and call.receiver.name in self._block_params
                and bool(call.args)
                and isinstance(call.args[0], Str))

    def _on_verb(self, call: Call, legacy: bool = False):
        legacy = legacy or call.name in LEGACY_VERB_CALLS
        own_options = call.keyword_options()
        options = self._options_for(call)
        mapping = call.mapping()
        path = literal(mapping[0]) if mapping else call.first_literal()
        target = mapping[1] if mapping else options.get("to")

        if target is None and "controller" not in own_options and path and self._is_catch_all(path):
            logger.debug(f"Skipping default route '{path}' at line {call.line}")
            return

        controller_name: Optional[str] = None
        action: Optional[str] = None

        if target is not None:
            if is_redirect(target):
                logger.debug(f"Skipping redirect at line {call.line}")
                return
            if isinstance(target, Sym):
                action = target.name
            elif isinstance(target, Str) and not target.interpolated:
                if "#" in target.value:
                    controller_name, action = self._split_target(target.value)
                    if controller_name is None:
                        logger.debug(f"Skipping malformed mapping '{target.value}' at line {call.line}")
                        return
                else:
                    action = target.value
            else:
                logger.debug(f"Skipping non-controller target at line {call.line}")
                return

        if controller_name is None:
            controller = options.get("controller")
            if isinstance(controller, Regex):
                logger.debug(f"Skipping pattern controller at line {call.line}")
                return
            controller_name = literal(controller)
        if action is None:
            action = literal(options.get("action"))

        if controller_name is None and action is None and path:
            controller_name, action = self._split_path(path)
        if not controller_name:
            logger.debug(f"No controller for '{call.name}' at line {call.line}")
            return

        if action is None:
            action = self._default_action(path, legacy)
        if not action:
            logger.debug(f"No action for '{call.name}' at line {call.line}")
            return

        controller_id = self.resolver.resolve_one(controller_name, self.scopes,
                                                  literal(options.get("module")))
        if controller_id is not None:
            self._emit(controller_id, action, call)

    def _on_root(self, call: Call):
        options = self._options_for(call)
        target = options.get("to")
        if target is None and call.args:
            target = call.args[0]
        if is_redirect(target):
            logger.debug(f"Skipping redirect root at line {call.line}")
            return

        if isinstance(target, Str) and "#" in target.value:
            controller_name, action = self._split_target(target.value)
        else:
            # Rails 2: map.root :controller => "home"
            controller_name = literal(options.get("controller"))
            action = literal(options.get("action")) or "index"

        if not controller_name or not action:
            logger.debug(f"Skipping malformed root at line {call.line}")
            return
        controller_id = self.resolver.resolve_one(controller_name, self.scopes,
                                                  literal(options.get("module")))
        if controller_id is not None:
            self._emit(controller_id, action, call)

    @staticmethod
    def _split_target(target: str) -> Tuple[Optional[str], Optional[str]]:
        """'posts#create' -> ('posts', 'create'); either side empty -> (None, None)."""
        controller_name, _, action = target.partition("#")
        if not controller_name or not action:
            return None, None
        return controller_name, action

    @staticmethod
    def _split_path(path: str) -> Tuple[Optional[str], Optional[str]]:
        """'posts/show' -> ('posts', 'show'); 'admin/posts/show' keeps the namespace."""
        segments = [segment for segment in path.strip("/").split("/") if segment]
        if len(segments) < 2 or any(_is_dynamic(s) or "(" in s for s in segments):
            return None, None
        return "/".join(segments[:-1]), segments[-1]

    @staticmethod
    def _is_catch_all(path: str) -> bool:
        """':controller(/:action(/:id(.:format)))' and its Rails 2 spellings."""
        tokens = _path_tokens(path)
        return (":controller" in tokens
                and all(token in CATCH_ALL_PLACEHOLDERS for token in tokens))

    @staticmethod
    def _default_action(path: Optional[str], legacy: bool) -> Optional[str]:
        """Action for a route that names a controller but no action."""
        if path and ":action" in _path_tokens(path):
            return WILDCARD_ACTION
        if legacy:
            return "index"
        segments = [segment for segment in (path or "").strip("/").split("/") if segment]
        if segments and not _is_dynamic(segments[-1]):
            return segments[-1]
        return None
