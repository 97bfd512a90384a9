"""Token visual provenance.

A token displays exactly one image at a time. The image is either the
token's own ``Original`` or a ``Composited`` squad image that keeps a
back-reference to the ``Original`` it was built from. The back-reference is
stored on the variant, never on the image resource itself, and is the only
way the original is restored.

Invariant: ``Composited.source`` is an ``Original``. Variants that break it
(built by hand, or restored from a corrupted host slot) are repaired by
:func:`normalize_visual` before the compositor acts on them.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from PIL.Image import Image

from squad_token.types import VisualKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Original:
    """Image as supplied by the host; carries no back-reference."""

    image: Image
    kind: ClassVar[VisualKind] = VisualKind.ORIGINAL


@dataclass(frozen=True)
class Composited:
    """Generated squad image.

    Attributes:
        image: The rasterized 2x2 composite.
        source: The ``Original`` the composite was derived from.
    """

    image: Image
    source: Optional["TokenVisual"]
    kind: ClassVar[VisualKind] = VisualKind.COMPOSITED


TokenVisual = Union[Original, Composited]


def is_composited(visual: TokenVisual) -> bool:
    return isinstance(visual, Composited)


def source_of(visual: TokenVisual) -> Optional[Original]:
    """Return the back-referenced original, or ``None`` for an ``Original``."""
    if isinstance(visual, Composited) and isinstance(visual.source, Original):
        return visual.source
    return None


def normalize_visual(visual: TokenVisual) -> TokenVisual:
    """Repair a visual whose back-reference breaks the no-compound invariant.

    * A composite of a composite is unwrapped to the innermost ``Original``.
    * A composite without a back-reference is demoted to ``Original``.
    """
    if not isinstance(visual, Composited) or isinstance(visual.source, Original):
        return visual

    source = visual.source
    while isinstance(source, Composited):
        source = source.source
    if isinstance(source, Original):
        logger.warning("Composite built from another composite; unwrapping source")
        return Composited(image=visual.image, source=source)

    logger.warning("Composite without back-reference; treating image as original")
    return Original(image=visual.image)
