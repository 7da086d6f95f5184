#!/usr/bin/env python3
"""
Action-Set Synthesizer
======================
Expands a resource declaration into the ordered list of controller actions
it routes to.

    resources :posts                            -> index show new create edit update destroy
    resource :profile                           -> show new create edit update destroy
    resources :posts, only: [:show, :index]     -> index show
    resources :posts, except: [:edit]           -> index show new create update destroy
    resources :posts, only: :none               -> (nothing)
    resources :posts, member: {...}, collection: [...]
                                                -> standard..., member..., collection...

Option values arrive already normalized to ordered name lists
(see nodes.names_of), so nothing here depends on how they were written.
"""

import logging
from typing import List, Optional, Sequence

from .base import ResourceKind

logger = logging.getLogger("route_prepare.actions")


class ActionSetSynthesizer:
    """Ordered action lists for plural and singular resources."""

    STANDARD_ACTIONS = {
        ResourceKind.PLURAL: ("index", "show", "new", "create", "edit", "update", "destroy"),
        ResourceKind.SINGULAR: ("show", "new", "create", "edit", "update", "destroy"),
    }

    # only: :none and except: :all both mean "no standard actions"
    ONLY_NONE = "none"
    EXCEPT_ALL = "all"

    @staticmethod
    def standard_actions(kind: ResourceKind, only: Optional[Sequence[str]] = None,
                         except_: Optional[Sequence[str]] = None) -> List[str]:
        """
        Standard actions for kind filtered by only/except.

        The standard order always wins over the order only/except were written in.
        """
        standard = ActionSetSynthesizer.STANDARD_ACTIONS[kind]

        if only is not None:
            if list(only) == [ActionSetSynthesizer.ONLY_NONE]:
                return []
            if list(only) != [ActionSetSynthesizer.EXCEPT_ALL]:
                wanted = set(only)
                standard = tuple(action for action in standard if action in wanted)

        if except_ is not None:
            if list(except_) == [ActionSetSynthesizer.EXCEPT_ALL]:
                return []
            if list(except_) != [ActionSetSynthesizer.ONLY_NONE]:
                excluded = set(except_)
                standard = tuple(action for action in standard if action not in excluded)

        return list(standard)

    @staticmethod
    def extension_actions(member: Sequence[str] = (), collection: Sequence[str] = ()) -> List[str]:
        """Member actions first, then collection actions, each in declaration order."""
        return list(member) + list(collection)

    @staticmethod
    def synthesize(kind: ResourceKind, only: Optional[Sequence[str]] = None,
                   except_: Optional[Sequence[str]] = None, member: Sequence[str] = (),
                   collection: Sequence[str] = ()) -> List[str]:
        """
        Full action list for one resource.

        Args:
            kind: plural (`resources`) or singular (`resource`)
            only: names from the :only option, or None when absent
            except_: names from the :except option, or None when absent
            member: member extension names in declaration order
            collection: collection extension names in declaration order

        Returns:
            Ordered action names: filtered standard set, then member, then collection.
        """
        actions = ActionSetSynthesizer.standard_actions(kind, only, except_)
        actions.extend(ActionSetSynthesizer.extension_actions(member, collection))

        logger.debug(f"Synthesized {len(actions)} actions for {kind.value}: {actions}")
        return actions
