import random
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from typefight.models import Session


def now_ms() -> int:
    return int(time.time() * 1000)


class GameVariant(ABC):
    """One mutually exclusive game-state shape a session can hold.

    ``initialize`` builds a fresh state for the session; ``update`` mutates it
    in place for a single player event and returns the delta to broadcast.
    A delta always carries ``gameType``, ``playerId`` and ``type`` plus only
    the fields that changed.
    """

    name: str = ''
    # Variants that own a server-side repeating loop (see GameController)
    owns_loop = False

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @abstractmethod
    def initialize(self, session: Session) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def update(self, session: Session, player_id, event: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def on_player_left(self, session: Session, player_id) -> Optional[Dict[str, Any]]:
        """React to a player leaving mid-game; returns a delta or None."""
        return None

    def delta(self, player_id, event_type, **fields) -> Dict[str, Any]:
        payload = {'gameType': self.name, 'playerId': player_id, 'type': event_type}
        payload.update(fields)
        return payload


def event_type_of(event) -> Optional[str]:
    if isinstance(event, dict):
        return text_field(event, 'type')
    return None


def text_field(event, key) -> Optional[str]:
    """String value of ``event[key]``; anything else reads as missing."""
    value = event.get(key)
    return value if isinstance(value, str) else None
