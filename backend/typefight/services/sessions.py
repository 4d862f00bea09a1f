"""In-memory session registry keyed by join code."""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from typefight.models import Player, Session, generate_join_code, normalize_join_code

logger = logging.getLogger(__name__)


class SessionStore:
    """Owns the join code -> Session map.

    A session lives until its player list becomes empty. Sessions that were
    created but never joined are pruned once they are older than
    ``empty_ttl_sec``.
    """

    def __init__(self, code_length: int = 6, empty_ttl_sec: Optional[int] = 600, rng=None):
        self.code_length = code_length
        self.empty_ttl_sec = empty_ttl_sec
        self._rng = rng
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, join_code) -> bool:
        return self.lookup(join_code) is not None

    def create(self, game_name: Optional[str] = None) -> Session:
        with self._lock:
            self._prune_unjoined()
            while True:
                code = generate_join_code(self.code_length, self._rng)
                if code not in self._sessions:
                    break
            session = Session(code, game_name)
            self._sessions[code] = session
        logger.info(f"[session-create] code={code} game={game_name}")
        return session

    def lookup(self, join_code) -> Optional[Session]:
        code = normalize_join_code(join_code)
        if not code:
            return None
        return self._sessions.get(code)

    def add_player(self, join_code, player: Player) -> Optional[Session]:
        session = self.lookup(join_code)
        if not session:
            return None
        session.add_player(player)
        return session

    def remove_player(self, join_code, player_id) -> Optional[Session]:
        """Remove a member; the session is deleted once nobody is left.

        Returns the (possibly now unreachable) session, or None for an
        unknown code or a player who is not a member.
        """
        session = self.lookup(join_code)
        if not session or not session.remove_player(player_id):
            return None
        if not session.players:
            self.delete(session.join_code)
        return session

    def delete(self, join_code) -> bool:
        code = normalize_join_code(join_code)
        with self._lock:
            removed = self._sessions.pop(code, None) if code else None
        if removed:
            logger.info(f"[session-delete] code={code}")
        return removed is not None

    def codes(self) -> List[str]:
        return list(self._sessions)

    def _prune_unjoined(self) -> None:
        if not self.empty_ttl_sec:
            return
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=self.empty_ttl_sec)
        stale = [code for code, s in self._sessions.items() if not s.players and s.created_at < cutoff]
        for code in stale:
            del self._sessions[code]
            logger.info(f"[session-prune] code={code} reason=never-joined")
