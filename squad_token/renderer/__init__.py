"""Rendering subpackage.

Provides the scene graph and rasterizer the compositor uses to turn a token
icon and a background frame into a single squad texture:

* :mod:`squad_token.renderer.scene` describes positioned sprites in a flat
  container, including the 2x2 squad arrangement.
* :mod:`squad_token.renderer.texture` loads textures from disk and paints a
  container into one Pillow image (bounds-sized, z-ordered alpha compositing).
"""

from squad_token.renderer.scene import Container, Sprite, build_squad_scene
from squad_token.renderer.texture import (
    BackgroundLoadError,
    TextureRenderer,
    render_scene,
)

__all__ = [
    "BackgroundLoadError",
    "Container",
    "Sprite",
    "TextureRenderer",
    "build_squad_scene",
    "render_scene",
]
