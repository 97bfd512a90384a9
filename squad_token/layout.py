"""Squad composite geometry.

The token icon is centered in a ``size x size`` cell, where ``size`` is the
icon's longest edge. Four cells form a 2x2 grid with half a cell of margin
before the first column/row and a half-cell gutter between them, all sitting
on a background scaled to ``scale * size`` on each edge.

Example: a 100x140 icon gives ``size=140``, ``dx=20``, ``dy=0``, tile
origins ``(90, 70)``, ``(300, 70)``, ``(90, 280)``, ``(300, 280)`` and a
490x490 background.
"""

from dataclasses import dataclass
from typing import Tuple

from squad_token.config import DEFAULT_BACKGROUND_SCALE


Point = Tuple[float, float]


@dataclass(frozen=True)
class SquadLayout:
    """Resolved placement for one composite.

    Attributes:
        size: Edge of the square bounding box of the icon.
        dx: Horizontal offset centering the icon in its cell.
        dy: Vertical offset centering the icon in its cell.
        background_size: Edge of the scaled background.
        tiles: Icon origins, row-major (top-left, top-right, bottom-left,
            bottom-right).
    """

    size: int
    dx: float
    dy: float
    background_size: float
    tiles: Tuple[Point, Point, Point, Point]


def squad_layout(
    width: int, height: int, scale: float = DEFAULT_BACKGROUND_SCALE
) -> SquadLayout:
    if width <= 0 or height <= 0:
        raise ValueError(f"Icon dimensions must be positive, got {width}x{height}")

    size = max(width, height)
    dx = (size - width) / 2
    dy = (size - height) / 2

    near = size / 2
    far = size * 2
    tiles = (
        (near + dx, near + dy),
        (far + dx, near + dy),
        (near + dx, far + dy),
        (far + dx, far + dy),
    )
    return SquadLayout(
        size=size,
        dx=dx,
        dy=dy,
        background_size=size * scale,
        tiles=tiles,
    )
