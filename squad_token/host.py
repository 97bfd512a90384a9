"""Collaborator contracts.

The core never reaches for globals: every host facility it needs is passed
in as one of the protocols below. :mod:`squad_token.stores` provides
in-memory implementations used by the demo app and the tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol, Sequence

from PIL.Image import Image

from squad_token.types import ActorID, ImagePath

if TYPE_CHECKING:
    from squad_token.renderer.scene import Container
    from squad_token.settings import SettingConfig
    from squad_token.entity import Token
    from squad_token.visual import TokenVisual


class FlagStore(Protocol):
    """Key-value attributes attached to long-lived actors."""

    def get_flag(self, actor_id: ActorID, scope: str, key: str) -> Any:
        """Return the stored value, or ``None`` when absent."""
        ...

    def set_flag(self, actor_id: ActorID, scope: str, key: str, value: Any) -> None:
        ...


class SettingsRegistry(Protocol):
    def register(self, scope: str, key: str, config: SettingConfig) -> None:
        ...

    def get(self, scope: str, key: str) -> Any:
        """Return the value, the registered default, or raise ``KeyError``."""
        ...

    def set(self, scope: str, key: str, value: Any) -> None:
        ...


class Renderer(Protocol):
    async def load_texture(self, path: ImagePath) -> Image:
        """Load an image; raise ``BackgroundLoadError`` on failure."""
        ...

    def render_scene(self, container: Container) -> Image:
        ...


class TokenCanvas(Protocol):
    """Placed tokens and their current-image slots."""

    def tokens(self) -> Sequence[Token]:
        ...

    def get_displayed_image(self, token: Token) -> TokenVisual:
        ...

    def set_displayed_image(self, token: Token, visual: TokenVisual) -> None:
        ...

    def redraw(self, token: Token) -> None:
        """Signal that the token's visual changed and must be repainted."""
        ...


class FilePicker(Protocol):
    async def pick(self, type: str, initial_path: Optional[str] = None) -> Optional[str]:
        """Return the confirmed path, or ``None`` if the user cancelled."""
        ...


ErrorChannel = Callable[[str, BaseException], None]
