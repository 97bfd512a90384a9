"""Composable scene graph.

A minimal stand-in for the host engine's display objects: a flat
``Container`` of positioned ``Sprite`` nodes that a renderer can rasterize
into a single texture.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from PIL.Image import Image

from squad_token.layout import SquadLayout


@dataclass
class Sprite:
    texture: Image
    x: float = 0.0
    y: float = 0.0
    width: Optional[float] = None
    height: Optional[float] = None
    z_index: int = 0

    @property
    def display_size(self) -> Tuple[float, float]:
        width = self.texture.width if self.width is None else self.width
        height = self.texture.height if self.height is None else self.height
        return width, height


@dataclass
class Container:
    children: List[Sprite] = field(default_factory=list)

    def add_child(self, sprite: Sprite) -> Sprite:
        self.children.append(sprite)
        return sprite

    def ordered(self) -> List[Sprite]:
        """Children in paint order: ascending ``z_index``, stable otherwise."""
        return sorted(self.children, key=lambda s: s.z_index)


def scene_bounds(container: Container) -> Tuple[float, float, float, float]:
    """Return ``(left, top, right, bottom)`` enclosing every child."""
    if not container.children:
        return 0.0, 0.0, 0.0, 0.0
    lefts, tops, rights, bottoms = [], [], [], []
    for sprite in container.children:
        width, height = sprite.display_size
        lefts.append(sprite.x)
        tops.append(sprite.y)
        rights.append(sprite.x + width)
        bottoms.append(sprite.y + height)
    return min(lefts), min(tops), max(rights), max(bottoms)


def scene_size(container: Container) -> Tuple[int, int]:
    left, top, right, bottom = scene_bounds(container)
    return math.ceil(right - left), math.ceil(bottom - top)


def build_squad_scene(
    texture: Image, background: Image, layout: SquadLayout
) -> Container:
    """Background behind four copies of ``texture`` placed per ``layout``."""
    container = Container()
    container.add_child(
        Sprite(
            background,
            width=layout.background_size,
            height=layout.background_size,
            z_index=-1,
        )
    )
    for x, y in layout.tiles:
        container.add_child(Sprite(texture, x=x, y=y))
    return container
