"""Background setting registration and access.

The background frame path is a single world-scoped string registered with
the host settings registry during the ``setup`` lifecycle event. Reads fall
back to the configured default when the host has no value yet.
"""

import logging
from dataclasses import dataclass
from typing import Any, Type

from squad_token.config import DEFAULT_CONFIG, SquadConfig
from squad_token.host import SettingsRegistry
from squad_token.types import Flag, ImagePath, SettingScope


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingConfig:
    """Registration metadata for one host setting.

    Attributes:
        name: Human-readable label.
        hint: Short description shown by settings UIs.
        scope: ``world`` settings are shared by every client of a world.
        config: Whether the setting appears in the host's settings menu.
        requires_reload: Whether changing it requires a client reload.
        type: Python type of the value.
        default: Value returned before anything is stored.
    """

    name: str
    hint: str
    scope: SettingScope = SettingScope.WORLD
    config: bool = False
    requires_reload: bool = False
    type: Type[Any] = str
    default: Any = None


def background_setting(config: SquadConfig = DEFAULT_CONFIG) -> SettingConfig:
    return SettingConfig(
        name="Squad Token Background",
        hint="Image to use as a frame/background",
        scope=SettingScope.WORLD,
        config=False,
        requires_reload=False,
        type=str,
        default=config.default_background,
    )


def register_settings(
    settings: SettingsRegistry, config: SquadConfig = DEFAULT_CONFIG
) -> None:
    settings.register(config.scope, Flag.BACKGROUND, background_setting(config))
    logger.debug("Registered %s.%s setting", config.scope, Flag.BACKGROUND)


def get_background(
    settings: SettingsRegistry, config: SquadConfig = DEFAULT_CONFIG
) -> ImagePath:
    """Current background path, or the default when unset or unregistered."""
    try:
        path = settings.get(config.scope, Flag.BACKGROUND)
    except KeyError:
        path = None
    if not path:
        logger.debug("No background configured; using %s", config.default_background)
        return config.default_background
    return path


def store_background(
    settings: SettingsRegistry, path: ImagePath, config: SquadConfig = DEFAULT_CONFIG
) -> None:
    settings.set(config.scope, Flag.BACKGROUND, path)
