"""Public entry point.

``SquadToken`` bundles the host collaborators once so callers (macros, UI
buttons, the demo app) can use the operations without threading every store
through each call::

    squad = SquadToken(flags, settings, canvas, renderer, picker)
    register_hooks(hooks, squad)
    await hooks.call_all(HookName.SETUP)

    squad.toggle(["goblin"])
    await canvas.draw(hooks)  # goblin's tokens now show the squad composite
"""

from typing import Iterable, Optional

from squad_token.background import select_background, set_background
from squad_token.compositor import Action, Compositor
from squad_token.config import DEFAULT_CONFIG, SquadConfig
from squad_token.entity import Token
from squad_token.host import (
    ErrorChannel,
    FilePicker,
    FlagStore,
    Renderer,
    SettingsRegistry,
    TokenCanvas,
)
from squad_token.membership import is_squad, toggle
from squad_token.settings import get_background, register_settings
from squad_token.types import ActorID, ImagePath


class SquadToken:
    def __init__(
        self,
        flags: FlagStore,
        settings: SettingsRegistry,
        canvas: TokenCanvas,
        renderer: Renderer,
        picker: Optional[FilePicker] = None,
        config: SquadConfig = DEFAULT_CONFIG,
        on_error: Optional[ErrorChannel] = None,
    ):
        self.flags = flags
        self.settings = settings
        self.canvas = canvas
        self.picker = picker
        self.config = config
        self.compositor = Compositor(
            flags, settings, canvas, renderer, config=config, on_error=on_error
        )

    def toggle(self, actor_ids: Iterable[ActorID]) -> None:
        toggle(self.flags, actor_ids, self.config)

    def is_squad(self, actor_id: ActorID) -> bool:
        return is_squad(self.flags, actor_id, self.config)

    @property
    def background(self) -> ImagePath:
        return get_background(self.settings, self.config)

    def set_background(self, path: ImagePath) -> int:
        return set_background(self.settings, self.canvas, path, self.config)

    async def select_background(self, initial_path: str = "") -> Optional[ImagePath]:
        if self.picker is None:
            raise RuntimeError("No file picker available")
        return await select_background(
            self.picker, self.settings, self.canvas, initial_path, self.config
        )

    def on_setup(self) -> None:
        register_settings(self.settings, self.config)

    async def on_refresh_token(self, token: Token) -> Action:
        return await self.compositor.on_refresh_token(token)
