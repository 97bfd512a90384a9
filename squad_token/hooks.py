"""Lifecycle event bus.

Handlers are plain callables or coroutine functions subscribed under a
:class:`~squad_token.types.HookName`. ``call_all`` runs them in subscription
order and awaits any coroutine result before moving on, so a host render pass
dispatches ``refreshToken`` sequentially, one token at a time.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List

from squad_token.types import HookName

if TYPE_CHECKING:
    from squad_token.module import SquadToken


logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Hooks:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def on(self, name: str, handler: Handler) -> Handler:
        self._handlers.setdefault(str(name), []).append(handler)
        return handler

    def off(self, name: str, handler: Handler) -> bool:
        handlers = self._handlers.get(str(name), [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def handlers(self, name: str) -> List[Handler]:
        return list(self._handlers.get(str(name), []))

    async def call_all(self, name: str, *args: Any) -> List[Any]:
        results: List[Any] = []
        for handler in self.handlers(name):
            result = handler(*args)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results


def register_hooks(hooks: Hooks, module: SquadToken) -> None:
    """Subscribe the module's lifecycle handlers."""
    hooks.on(HookName.SETUP, module.on_setup)
    hooks.on(HookName.REFRESH_TOKEN, module.on_refresh_token)
    logger.debug("Registered %s and %s handlers", HookName.SETUP, HookName.REFRESH_TOKEN)
