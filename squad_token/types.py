"""Common type aliases and enumerations.

Flag and setting keys are namespaced under :data:`SCOPE` in every host store,
so the strings below are part of the persisted data and must not change.
"""

from enum import StrEnum, auto


SCOPE = "squad-token"

ActorID = str
TokenID = str
ImagePath = str


class Flag(StrEnum):
    """Keys stored under :data:`SCOPE` in the host flag and settings stores."""

    IS_SQUAD = "is-squad"
    MODIFIED = "token-modified-from"
    BACKGROUND = "background"


class SettingScope(StrEnum):
    """Persistence scope of a registered setting."""

    WORLD = auto()
    CLIENT = auto()


class VisualKind(StrEnum):
    """Provenance of the image a token currently displays."""

    ORIGINAL = auto()
    COMPOSITED = auto()


class HookName(StrEnum):
    """Host lifecycle events the module subscribes to."""

    REFRESH_TOKEN = "refreshToken"
    SETUP = "setup"
