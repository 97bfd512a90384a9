import numpy as np
import numpy.typing as npt
from PIL import Image
from typing import Tuple

# Type aliases for clarity
FloatArray = npt.NDArray[np.float32]
UInt8Array = npt.NDArray[np.uint8]
BoolArray = npt.NDArray[np.bool_]

RGBA = Tuple[int, int, int, int]


def images_equal(a: Image.Image, b: Image.Image) -> bool:
    """
    Pixel-exact comparison after normalizing both images to RGBA.
    """
    if a.size != b.size:
        return False
    arr_a: UInt8Array = np.asarray(a.convert("RGBA"), dtype=np.uint8)
    arr_b: UInt8Array = np.asarray(b.convert("RGBA"), dtype=np.uint8)
    return bool(np.array_equal(arr_a, arr_b))


def _centered_grid(size: int) -> Tuple[FloatArray, FloatArray]:
    """
    Pixel-center coordinates in [-1, 1] for a square image.
    """
    coords: FloatArray = (
        (np.arange(size, dtype=np.float32) + 0.5) / np.float32(size) * 2.0 - 1.0
    ).astype(np.float32)
    yy, xx = np.meshgrid(coords, coords, indexing="ij")
    return xx, yy


def make_frame_image(
    size: int,
    border: RGBA = (196, 160, 72, 255),
    fill: RGBA = (32, 32, 40, 160),
    border_percent: float = 0.08,
) -> Image.Image:
    """
    Square frame: a rounded border ring around a translucent fill.
    """
    xx, yy = _centered_grid(size)
    # Superellipse distance gives softly rounded corners.
    dist: FloatArray = (np.abs(xx) ** 6 + np.abs(yy) ** 6) ** (1.0 / 6.0)

    inside: BoolArray = dist <= 1.0
    ring: BoolArray = inside & (dist >= 1.0 - 2.0 * border_percent)

    out: UInt8Array = np.zeros((size, size, 4), dtype=np.uint8)
    out[inside] = np.array(fill, dtype=np.uint8)
    out[ring] = np.array(border, dtype=np.uint8)
    return Image.fromarray(out)


def make_disc_image(width: int, height: int, color: RGBA) -> Image.Image:
    """
    Filled ellipse touching the edges of a transparent ``width x height`` image.
    """
    xs: FloatArray = ((np.arange(width) + 0.5) / width * 2.0 - 1.0).astype(np.float32)
    ys: FloatArray = ((np.arange(height) + 0.5) / height * 2.0 - 1.0).astype(
        np.float32
    )
    yy, xx = np.meshgrid(ys, xs, indexing="ij")
    mask: BoolArray = xx**2 + yy**2 <= 1.0

    out: UInt8Array = np.zeros((height, width, 4), dtype=np.uint8)
    out[mask] = np.array(color, dtype=np.uint8)
    return Image.fromarray(out)
