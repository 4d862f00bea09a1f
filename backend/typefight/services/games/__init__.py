"""Game domain services: per-game state machines and timers.

This package contains pure(ish) domain logic that is driven by the
controller, keeping transport concerns separated from core game mechanics.
"""

from typing import Dict, Optional

from .base import GameVariant
from .lobby import LOBBY_GAME_NAME, LobbyVariant
from .quickkeys import QuickKeysVariant
from .spacebarinvaders import SpacebarInvadersVariant
from .textsplosion import TextSplosionVariant
from .typeflight import TypeFlightVariant
from .words import WordSource

GAME_VARIANTS = (
    LobbyVariant,
    QuickKeysVariant,
    SpacebarInvadersVariant,
    TextSplosionVariant,
    TypeFlightVariant,
)


def build_variants(rng=None, words: Optional[WordSource] = None) -> Dict[str, GameVariant]:
    """One instance of every variant, keyed by its game name."""
    variants = {}
    for cls in GAME_VARIANTS:
        if cls is SpacebarInvadersVariant:
            variants[cls.name] = cls(rng=rng, words=words)
        else:
            variants[cls.name] = cls(rng=rng)
    return variants


__all__ = [
    'GAME_VARIANTS', 'LOBBY_GAME_NAME', 'GameVariant', 'WordSource', 'build_variants',
    'LobbyVariant', 'QuickKeysVariant', 'SpacebarInvadersVariant',
    'TextSplosionVariant', 'TypeFlightVariant',
]
