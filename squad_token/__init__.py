"""squad_token
=================================

Squad decoration for virtual tabletop tokens: actors flagged as a squad are
drawn as a 2x2 tiling of their own icon over a background frame, and drawn
normally again once the flag is cleared.

The symbols re-exported here are the ones a host integration needs::

    from squad_token import SquadToken, Hooks, register_hooks

Host facilities (flag store, settings registry, canvas, renderer, file
picker) are injected; see :mod:`squad_token.host` for the contracts and
:mod:`squad_token.stores` for in-memory implementations.
"""

from .compositor import Action, Compositor, decide, reset_token
from .config import DEFAULT_CONFIG, SquadConfig
from .entity import Token
from .hooks import Hooks, register_hooks
from .membership import ToggleError, is_squad, toggle
from .module import SquadToken
from .types import SCOPE, Flag, HookName
from .visual import Composited, Original, TokenVisual

__all__ = [
    "Action",
    "Composited",
    "Compositor",
    "DEFAULT_CONFIG",
    "Flag",
    "HookName",
    "Hooks",
    "Original",
    "SCOPE",
    "SquadConfig",
    "SquadToken",
    "ToggleError",
    "Token",
    "TokenVisual",
    "decide",
    "is_squad",
    "register_hooks",
    "reset_token",
    "toggle",
]
