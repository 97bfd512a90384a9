"""Token primitives & ID generation.

A ``Token`` is the visual instance of an actor placed on the canvas. It is a
plain value: the image it currently displays lives in the host canvas slot,
and the actor's attributes live in the host flag store.

Examples
--------
>>> from squad_token.entity import Token, new_token_id
>>> token = Token(id=new_token_id(), actor_id="goblin")
"""

from dataclasses import dataclass
from typing import Iterator

from squad_token.types import ActorID, TokenID


@dataclass(frozen=True)
class Token:
    """Placed token.

    Attributes:
        id: Canvas-unique identifier.
        actor_id: Actor whose flags drive this token's visual.
    """

    id: TokenID
    actor_id: ActorID


def token_id_generator(prefix: str = "token") -> Iterator[TokenID]:
    """Yield an infinite sequence of process-unique token IDs."""
    n = 0
    while True:
        yield f"{prefix}-{n}"
        n += 1


_token_id_gen = token_id_generator()


def new_token_id() -> TokenID:
    """Return a newly allocated unique token ID."""
    return next(_token_id_gen)
