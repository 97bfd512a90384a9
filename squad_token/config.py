"""Process-wide configuration.

``SquadConfig`` holds the constants the compositor needs that are not stored
in the host. The world-scoped background *value* lives in the host settings
registry (see :mod:`squad_token.settings`); only its default is kept here.
"""

import logging
import os
from dataclasses import dataclass

from squad_token.types import SCOPE, ImagePath


DEFAULT_ASSET_ROOT: str = os.path.join(
    os.path.dirname(os.path.realpath(__file__)), "assets"
)
DEFAULT_BACKGROUND: ImagePath = "background.png"
DEFAULT_BACKGROUND_SCALE = 3.5


@dataclass(frozen=True)
class SquadConfig:
    """Static module configuration.

    Attributes:
        scope: Namespace for flags and settings in the host stores.
        default_background: Background path used when the setting is absent.
            Relative paths are resolved against ``asset_root`` by the renderer.
        asset_root: Directory holding bundled assets.
        background_scale: Background edge length as a multiple of the icon's
            square bounding box.
    """

    scope: str = SCOPE
    default_background: ImagePath = DEFAULT_BACKGROUND
    asset_root: str = DEFAULT_ASSET_ROOT
    background_scale: float = DEFAULT_BACKGROUND_SCALE


DEFAULT_CONFIG = SquadConfig()


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
