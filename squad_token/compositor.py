"""Squad compositor.

Reacts to every ``refreshToken`` event and brings the token's displayed
image in line with its actor's squad flag:

=========  ===========  ==========================================
is-squad   displayed    action
=========  ===========  ==========================================
False      Composited   revert to the back-referenced ``Original``
False      Original     nothing
True       Composited   nothing (never composite a composite)
True       Original     build and install the squad composite
=========  ===========  ==========================================

Refresh events arrive far more often than state changes, so the no-op rows
are the common path and must not touch the canvas.

Applying suspends once, while the background loads. Invocations for the same
token are serialized with a per-token lock, and after the load the token's
slot is re-checked against the snapshot taken before suspending; if anything
changed the apply is abandoned and left to the next refresh.
"""

import asyncio
import logging
import weakref
from enum import StrEnum, auto
from typing import Optional

from PIL.Image import Image

from squad_token.config import DEFAULT_CONFIG, SquadConfig
from squad_token.entity import Token
from squad_token.host import (
    ErrorChannel,
    FlagStore,
    Renderer,
    SettingsRegistry,
    TokenCanvas,
)
from squad_token.layout import SquadLayout, squad_layout
from squad_token.membership import is_squad
from squad_token.renderer.scene import build_squad_scene
from squad_token.renderer.texture import BackgroundLoadError
from squad_token.settings import get_background
from squad_token.types import TokenID
from squad_token.visual import (
    Composited,
    Original,
    TokenVisual,
    is_composited,
    normalize_visual,
    source_of,
)


logger = logging.getLogger(__name__)


class Action(StrEnum):
    NOOP = auto()
    APPLY = auto()
    REVERT = auto()


def decide(squad: bool, visual: TokenVisual) -> Action:
    composited = is_composited(visual)
    if squad and not composited:
        return Action.APPLY
    if not squad and composited:
        return Action.REVERT
    return Action.NOOP


def log_error(message: str, exc: BaseException) -> None:
    logger.error(message, exc_info=exc)


def compose_squad_image(
    renderer: Renderer, texture: Image, background: Image, layout: SquadLayout
) -> Image:
    """Rasterize four copies of ``texture`` over ``background``."""
    scene = build_squad_scene(texture, background, layout)
    return renderer.render_scene(scene)


def reset_token(canvas: TokenCanvas, token: Token) -> bool:
    """Restore the original image of a composited token.

    Returns:
        bool: True if the token was composited and has been reverted.
    """
    source = source_of(normalize_visual(canvas.get_displayed_image(token)))
    if source is None:
        return False
    canvas.set_displayed_image(token, source)
    canvas.redraw(token)
    logger.debug("Reverted token %s to its original image", token.id)
    return True


class Compositor:
    def __init__(
        self,
        flags: FlagStore,
        settings: SettingsRegistry,
        canvas: TokenCanvas,
        renderer: Renderer,
        config: SquadConfig = DEFAULT_CONFIG,
        on_error: Optional[ErrorChannel] = None,
    ):
        self.flags = flags
        self.settings = settings
        self.canvas = canvas
        self.renderer = renderer
        self.config = config
        self.on_error: ErrorChannel = on_error or log_error
        self._locks: "weakref.WeakValueDictionary[TokenID, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, token: Token) -> asyncio.Lock:
        lock = self._locks.get(token.id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[token.id] = lock
        return lock

    def current_visual(self, token: Token) -> TokenVisual:
        """Read the token's slot, writing back a repaired variant if needed."""
        visual = self.canvas.get_displayed_image(token)
        repaired = normalize_visual(visual)
        if repaired is not visual:
            self.canvas.set_displayed_image(token, repaired)
        return repaired

    async def on_refresh_token(self, token: Token) -> Action:
        async with self._lock_for(token):
            squad = is_squad(self.flags, token.actor_id, self.config)
            visual = self.current_visual(token)
            action = decide(squad, visual)
            if action is Action.REVERT:
                reset_token(self.canvas, token)
            elif action is Action.APPLY:
                assert isinstance(visual, Original)
                if not await self.apply(token, visual):
                    return Action.NOOP
            return action

    async def apply(self, token: Token, visual: Original) -> bool:
        """Build the composite for ``visual`` and install it.

        Returns:
            bool: False if the icon has no area, the background failed to load
            or the token changed while it was loading; the token is left
            untouched in every case.
        """
        try:
            layout = squad_layout(
                visual.image.width, visual.image.height, self.config.background_scale
            )
        except ValueError as exc:
            self.on_error(f"Token {token.id} icon cannot be composited", exc)
            return False

        path = get_background(self.settings, self.config)
        try:
            background = await self.renderer.load_texture(path)
        except BackgroundLoadError as exc:
            self.on_error(f"Squad background {path!r} could not be loaded", exc)
            return False

        try:
            current = self.canvas.get_displayed_image(token)
        except KeyError:
            logger.debug("Token %s left the canvas during apply", token.id)
            return False
        if current is not visual or not is_squad(
            self.flags, token.actor_id, self.config
        ):
            logger.debug("Token %s changed during apply; skipping", token.id)
            return False

        image = compose_squad_image(self.renderer, visual.image, background, layout)
        self.canvas.set_displayed_image(token, Composited(image=image, source=visual))
        self.canvas.redraw(token)
        logger.debug("Applied squad composite to token %s", token.id)
        return True

    async def revert(self, token: Token) -> bool:
        async with self._lock_for(token):
            return reset_token(self.canvas, token)
