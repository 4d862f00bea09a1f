import random
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits
COSMETIC_FIELDS = ('alias', 'color', 'font', 'icon')


def generate_join_code(length=6, rng=None):
    """Generate a short, player-facing join code (not checked for uniqueness)."""
    rng = rng or random
    return ''.join(rng.choices(JOIN_CODE_ALPHABET, k=length))


def normalize_join_code(code) -> Optional[str]:
    if not code or not isinstance(code, str):
        return None
    return code.strip().upper() or None


@dataclass
class Player:
    id: str
    alias: Optional[str] = None
    color: Optional[str] = None
    font: Optional[str] = None
    icon: Optional[str] = None

    @classmethod
    def from_dict(cls, player_id: str, data: Optional[Dict[str, Any]]) -> 'Player':
        data = data or {}
        return cls(player_id, **{name: data.get(name) for name in COSMETIC_FIELDS})

    def merge(self, other: 'Player') -> None:
        # Re-joins overwrite cosmetics only; identity is fixed
        for name in COSMETIC_FIELDS:
            setattr(self, name, getattr(other, name))

    def to_dict(self):
        return {
            'id': self.id,
            'alias': self.alias,
            'color': self.color,
            'font': self.font,
            'icon': self.icon,
        }


@dataclass
class Session:
    join_code: str
    game_name: Optional[str] = None
    players: List[Player] = field(default_factory=list)
    game_state: Dict[str, Any] = field(default_factory=dict)
    started: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def get_player(self, player_id) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def add_player(self, player: Player) -> Player:
        existing = self.get_player(player.id)
        if existing:
            existing.merge(player)
            return existing
        self.players.append(player)
        return player

    def remove_player(self, player_id) -> bool:
        before = len(self.players)
        self.players = [p for p in self.players if p.id != player_id]
        return len(self.players) != before

    def to_dict(self):
        return {
            'joinCode': self.join_code,
            'gameName': self.game_name,
            'players': [p.to_dict() for p in self.players],
            'gameState': self.game_state,
            'started': self.started,
            'createdAt': self.created_at.isoformat(),
        }
