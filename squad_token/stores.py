"""In-memory host implementations.

These satisfy the protocols in :mod:`squad_token.host` using persistent maps
(``pyrsistent.PMap``), mirroring how a real host would keep per-actor flags,
world settings and per-token image slots. Every write swaps in a new map, so
a snapshot taken by ``items()`` or ``snapshot()`` is never mutated later.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence, Tuple

from PIL.Image import Image
from pyrsistent import PMap, pmap

from squad_token.entity import Token
from squad_token.renderer.texture import list_textures_in_directory
from squad_token.settings import SettingConfig
from squad_token.types import ActorID, HookName, TokenID
from squad_token.visual import Original, TokenVisual

if TYPE_CHECKING:
    from squad_token.hooks import Hooks


logger = logging.getLogger(__name__)

FlagKey = Tuple[str, str]


class MemoryFlagStore:
    def __init__(self) -> None:
        self.flags: PMap[ActorID, PMap[FlagKey, Any]] = pmap()

    def get_flag(self, actor_id: ActorID, scope: str, key: str) -> Any:
        return self.flags.get(actor_id, pmap()).get((scope, str(key)))

    def set_flag(self, actor_id: ActorID, scope: str, key: str, value: Any) -> None:
        actor_flags = self.flags.get(actor_id, pmap())
        self.flags = self.flags.set(actor_id, actor_flags.set((scope, str(key)), value))


class MemorySettings:
    def __init__(self) -> None:
        self.definitions: PMap[FlagKey, SettingConfig] = pmap()
        self.values: PMap[FlagKey, Any] = pmap()

    def register(self, scope: str, key: str, config: SettingConfig) -> None:
        self.definitions = self.definitions.set((scope, str(key)), config)

    def get(self, scope: str, key: str) -> Any:
        full_key = (scope, str(key))
        if full_key in self.values:
            return self.values[full_key]
        if full_key not in self.definitions:
            raise KeyError(f"Setting {scope}.{key} is not registered")
        return self.definitions[full_key].default

    def set(self, scope: str, key: str, value: Any) -> None:
        full_key = (scope, str(key))
        if full_key not in self.definitions:
            raise KeyError(f"Setting {scope}.{key} is not registered")
        config = self.definitions[full_key]
        if not isinstance(value, config.type):
            raise TypeError(
                f"Setting {scope}.{key} expects {config.type.__name__}, "
                f"got {type(value).__name__}"
            )
        self.values = self.values.set(full_key, value)


class Canvas:
    """Token layer with one displayed-image slot per token.

    ``redraws`` counts forced repaints per token; the reference host has no
    real display, so the counter is the observable refresh signal.
    """

    def __init__(self) -> None:
        self.placed: PMap[TokenID, Token] = pmap()
        self.visual: PMap[TokenID, TokenVisual] = pmap()
        self.redraws: PMap[TokenID, int] = pmap()

    def add_token(self, token: Token, image: Image) -> Token:
        self.placed = self.placed.set(token.id, token)
        self.visual = self.visual.set(token.id, Original(image=image))
        self.redraws = self.redraws.set(token.id, 0)
        return token

    def remove_token(self, token: Token) -> None:
        self.placed = self.placed.discard(token.id)
        self.visual = self.visual.discard(token.id)
        self.redraws = self.redraws.discard(token.id)

    def tokens(self) -> Sequence[Token]:
        return list(self.placed.values())

    def get_displayed_image(self, token: Token) -> TokenVisual:
        return self.visual[token.id]

    def set_displayed_image(self, token: Token, visual: TokenVisual) -> None:
        if token.id not in self.placed:
            raise KeyError(f"Token {token.id} is not on the canvas")
        self.visual = self.visual.set(token.id, visual)

    def redraw(self, token: Token) -> None:
        self.redraws = self.redraws.set(token.id, self.redraws.get(token.id, 0) + 1)

    async def draw(self, hooks: Hooks) -> None:
        """One render pass: fire ``refreshToken`` for every placed token."""
        for token in self.tokens():
            await hooks.call_all(HookName.REFRESH_TOKEN, token)


Chooser = Callable[[List[str], Optional[str]], Optional[str]]


def first_choice(paths: List[str], initial_path: Optional[str]) -> Optional[str]:
    if initial_path is not None and initial_path in paths:
        return initial_path
    return paths[0] if paths else None


class DirectoryFilePicker:
    """Picks an image from a directory listing.

    ``chooser`` stands in for the user: it receives the candidate paths and
    the pre-selected path and returns the confirmed path, or ``None`` to
    cancel. A directory passed as the pre-selected path is browsed instead of
    ``root``.
    """

    def __init__(self, root: str, chooser: Chooser = first_choice):
        self.root = root
        self.chooser = chooser

    async def pick(
        self, type: str = "image", initial_path: Optional[str] = None
    ) -> Optional[str]:
        if type != "image":
            raise ValueError(f"Unsupported picker type: {type}")
        directory = self.root
        if initial_path and os.path.isdir(initial_path):
            directory, initial_path = initial_path, None
        paths = list_textures_in_directory(directory)
        logger.debug("Picker offering %d images from %s", len(paths), directory)
        return self.chooser(paths, initial_path)
