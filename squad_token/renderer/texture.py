from typing import List
from PIL import Image, UnidentifiedImageError
from squad_token.config import DEFAULT_ASSET_ROOT
from squad_token.renderer.scene import Container, scene_bounds, scene_size
from squad_token.types import ImagePath
import asyncio
import logging
import math
import os


logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp")


class BackgroundLoadError(Exception):
    """Raised when an image cannot be read from ``path``."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Could not load image {path!r}: {cause}")
        self.path = path
        self.cause = cause


def resolve_path(path: ImagePath, asset_root: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(asset_root, path)


def load_texture(path: str) -> Image.Image:
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (
        OSError,
        UnidentifiedImageError,
        Image.DecompressionBombError,
        ValueError,
    ) as exc:
        raise BackgroundLoadError(path, exc) from exc


def list_textures_in_directory(dir: str) -> List[str]:
    if not os.path.isdir(dir):
        return []

    try:
        entries = os.listdir(dir)
    except (FileNotFoundError, NotADirectoryError, PermissionError, OSError):
        return []

    files = sorted(f for f in entries if f.lower().endswith(IMAGE_EXTENSIONS))
    return [os.path.join(dir, f) for f in files]


def _to_pixel(offset: float) -> int:
    # half pixels round up, matching the ceil used for sizes
    return math.floor(offset + 0.5)


def render_scene(container: Container) -> Image.Image:
    """
    Rasterizes a scene graph into a single RGBA image sized to its bounds.
    """
    left, top, _, _ = scene_bounds(container)
    width, height = scene_size(container)
    img = Image.new("RGBA", (max(width, 1), max(height, 1)), (0, 0, 0, 0))

    for sprite in container.ordered():
        sprite_w, sprite_h = sprite.display_size
        size = (max(math.ceil(sprite_w), 1), max(math.ceil(sprite_h), 1))
        tex = sprite.texture
        if tex.mode != "RGBA":
            tex = tex.convert("RGBA")
        if tex.size != size:
            tex = tex.resize(size)
        dest = (_to_pixel(sprite.x - left), _to_pixel(sprite.y - top))
        img.alpha_composite(tex, dest)

    return img


class TextureRenderer:
    asset_root: str

    def __init__(self, asset_root: str = DEFAULT_ASSET_ROOT):
        self.asset_root = asset_root

    async def load_texture(self, path: ImagePath) -> Image.Image:
        asset_path = resolve_path(path, self.asset_root)
        logger.debug("Loading texture %s", asset_path)
        return await asyncio.to_thread(load_texture, asset_path)

    def render_scene(self, container: Container) -> Image.Image:
        return render_scene(container)
