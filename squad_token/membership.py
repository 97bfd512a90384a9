"""Squad membership.

Membership is a single boolean flag stored on the actor, so every token of
that actor follows it. ``toggle`` only mutates flags; the visual change
happens on the next refresh of each token (see :mod:`squad_token.compositor`).
"""

import logging
from typing import Dict, Iterable

from squad_token.config import DEFAULT_CONFIG, SquadConfig
from squad_token.host import FlagStore
from squad_token.types import ActorID, Flag


logger = logging.getLogger(__name__)


class ToggleError(Exception):
    """One or more actors could not be toggled.

    Attributes:
        failures: Exception raised by the flag store, keyed by actor.
    """

    def __init__(self, failures: Dict[ActorID, Exception]):
        names = ", ".join(sorted(failures))
        super().__init__(f"Failed to toggle squad flag for: {names}")
        self.failures = failures


def is_squad(
    flags: FlagStore, actor_id: ActorID, config: SquadConfig = DEFAULT_CONFIG
) -> bool:
    """Only a stored ``True`` counts; absent or non-bool values do not."""
    return flags.get_flag(actor_id, config.scope, Flag.IS_SQUAD) is True


def toggle(
    flags: FlagStore,
    actor_ids: Iterable[ActorID],
    config: SquadConfig = DEFAULT_CONFIG,
) -> None:
    """Flip the squad flag of every actor independently.

    A failing write does not stop the remaining actors; all failures are
    raised together as a ``ToggleError`` once every actor was attempted.
    """
    failures: Dict[ActorID, Exception] = {}
    for actor_id in actor_ids:
        try:
            value = not is_squad(flags, actor_id, config)
            flags.set_flag(actor_id, config.scope, Flag.IS_SQUAD, value)
        except Exception as exc:
            logger.warning("Could not toggle squad flag for %s: %s", actor_id, exc)
            failures[actor_id] = exc
        else:
            logger.debug("Actor %s squad=%s", actor_id, value)
    if failures:
        raise ToggleError(failures)
