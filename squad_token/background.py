"""Background frame selection.

Changing the background reverts every composited token at once. Nothing is
rebuilt here: tokens that are still squad-marked are re-composited with the
new frame on their next refresh.
"""

import logging
from typing import Optional

from squad_token.compositor import reset_token
from squad_token.config import DEFAULT_CONFIG, SquadConfig
from squad_token.host import FilePicker, SettingsRegistry, TokenCanvas
from squad_token.settings import store_background
from squad_token.types import ImagePath


logger = logging.getLogger(__name__)


def set_background(
    settings: SettingsRegistry,
    canvas: TokenCanvas,
    path: ImagePath,
    config: SquadConfig = DEFAULT_CONFIG,
) -> int:
    """Persist ``path`` and revert every token on the canvas.

    Returns:
        int: Number of tokens that were showing a composite.
    """
    store_background(settings, path, config)
    reverted = 0
    for token in canvas.tokens():
        if reset_token(canvas, token):
            reverted += 1
        else:
            canvas.redraw(token)
    logger.info("Squad background set to %s (%d tokens reverted)", path, reverted)
    return reverted


async def select_background(
    picker: FilePicker,
    settings: SettingsRegistry,
    canvas: TokenCanvas,
    initial_path: str = "",
    config: SquadConfig = DEFAULT_CONFIG,
) -> Optional[ImagePath]:
    """Ask the user for a background image and apply it.

    Returns:
        Optional[ImagePath]: The selected path, or ``None`` if cancelled.
    """
    path = await picker.pick("image", initial_path or None)
    if not path:
        logger.debug("Background selection cancelled")
        return None
    set_background(settings, canvas, path, config)
    return path
