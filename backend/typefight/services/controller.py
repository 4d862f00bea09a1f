import logging
import threading
from typing import Any, Callable, Dict, Optional

from typefight.errors import (
    GameNotStarted,
    InvalidJoinCode,
    SessionAlreadyStarted,
    SessionNotFound,
    UnknownGame,
)
from typefight.models import Player, Session
from typefight.services.games import LOBBY_GAME_NAME, GameVariant, build_variants
from typefight.services.games.scheduler import SessionScheduler
from typefight.services.sessions import SessionStore

logger = logging.getLogger(__name__)

WAVE_TASK = 'wave-respawn'
HAZARD_TASK = 'hazard-loop'


def _noop_broadcast(join_code, event, payload):
    return None


class GameController:
    """Routes player events to the session's active game variant.

    The controller also owns the timers attached to a session: the delayed
    wave respawn after a cleared SpacebarInvaders wave and the TypeFlight
    hazard loop. Every mutation of a session runs under one re-entrant lock,
    so an event, a tick and a respawn never interleave on the same state.

    Deltas returned from ``update_game`` are broadcast by the caller. Deltas
    produced by the controller itself (timers, players leaving mid-game) go
    through ``broadcast(join_code, event, payload)``.
    """

    def __init__(
        self,
        store: SessionStore,
        scheduler: SessionScheduler,
        broadcast: Optional[Callable[[str, str, Dict[str, Any]], None]] = None,
        variants: Optional[Dict[str, GameVariant]] = None,
        wave_delay_sec: float = 5.0,
        tick_tuning: Optional[Dict[str, int]] = None,
    ):
        self.store = store
        self.scheduler = scheduler
        self.broadcast = broadcast or _noop_broadcast
        self.variants = variants or build_variants()
        self.wave_delay_sec = wave_delay_sec
        self.tick_tuning = tick_tuning or {}
        self._loop_epochs: Dict[str, int] = {}
        self._epoch_counter = 0
        self._lock = threading.RLock()

    # ---- sessions ----

    def create_session(self, game_name=None) -> Session:
        return self.store.create(game_name)

    def get_session(self, join_code) -> Session:
        session = self.store.lookup(join_code)
        if not session:
            raise SessionNotFound()
        return session

    def join_session(self, join_code, player: Player) -> Session:
        with self._lock:
            session = self.store.lookup(join_code)
            if not session:
                raise InvalidJoinCode()
            if session.started:
                raise SessionAlreadyStarted()
            self.store.add_player(session.join_code, player)
        logger.info(f"[join] session={session.join_code} player={player.id} alias={player.alias}")
        return session

    def leave_session(self, join_code, player_id) -> Optional[Session]:
        """Remove a player; returns the session, or None when the code is
        unknown or the player is not a member of that session.

        When the last player leaves the session is deleted and its timers
        are cancelled.
        """
        with self._lock:
            session = self.store.lookup(join_code)
            if not session or not session.get_player(player_id):
                return None
            delta = None
            variant = self.variants.get(session.game_name) if session.started else None
            if variant:
                delta = variant.on_player_left(session, player_id)
            self.store.remove_player(session.join_code, player_id)
            code = session.join_code
            if code not in self.store:
                self.scheduler.cancel(code)
                self._loop_epochs.pop(code, None)
                delta = None
            elif variant and variant.owns_loop and session.game_state.get('gameOver'):
                self.stop_loop(code)
        logger.info(f"[leave] session={code} player={player_id} remaining={len(session.players)}")
        if delta:
            self._safe_broadcast(code, 'game-update', delta)
        return session

    # ---- games ----

    def start_game(self, join_code, game_name) -> Session:
        with self._lock:
            session = self.get_session(join_code)
            variant = self.variants.get(game_name) if isinstance(game_name, str) else None
            if variant is None:
                logger.info(f"[start] session={session.join_code} unknown game={game_name!r}, using lobby")
                variant = self.variants[LOBBY_GAME_NAME]
            code = session.join_code
            # Any timer from the previous game belongs to state we are about to drop
            self.scheduler.cancel(code)
            self._loop_epochs.pop(code, None)
            session.game_name = variant.name
            session.game_state = variant.initialize(session)
            session.started = True
            if variant.owns_loop:
                self.start_loop(code)
        logger.info(f"[start] session={code} game={session.game_name} players={len(session.players)}")
        return session

    def update_game(self, join_code, player_id, event) -> Dict[str, Any]:
        with self._lock:
            session = self.get_session(join_code)
            if not session.started:
                raise GameNotStarted()
            variant = self.variants.get(session.game_name)
            if variant is None:
                raise UnknownGame(f"Unknown game: {session.game_name}")
            delta = variant.update(session, player_id, event if isinstance(event, dict) else {})
            code = session.join_code
            if variant.owns_loop and session.game_state.get('gameOver'):
                self.stop_loop(code)
            if delta.get('waveComplete') and hasattr(variant, 'start_next_wave'):
                self.scheduler.schedule(code, WAVE_TASK, self.wave_delay_sec, self.start_next_wave, code)
                logger.info(
                    f"[wave-scheduled] session={code} wave={delta.get('currentWaveNumber')} delay={self.wave_delay_sec}s"
                )
        return delta

    def start_next_wave(self, join_code) -> Optional[Dict[str, Any]]:
        """Fire the delayed respawn; a no-op when the session moved on."""
        with self._lock:
            session = self.store.lookup(join_code)
            if not session:
                logger.info(f"[timer-abort] session={join_code} task={WAVE_TASK} session gone")
                return None
            variant = self.variants.get(session.game_name)
            if not hasattr(variant, 'start_next_wave'):
                return None
            delta = variant.start_next_wave(session)
        if delta:
            logger.info(f"[wave-start] session={join_code} wave={delta['waveNumber']} dangers={len(delta['dangers'])}")
            self._safe_broadcast(join_code, 'game-update', delta)
        return delta

    # ---- authoritative loop ----

    def start_loop(self, join_code) -> None:
        with self._lock:
            self._epoch_counter += 1
            epoch = self._epoch_counter
            self._loop_epochs[join_code] = epoch
            self.scheduler.cancel(join_code, HAZARD_TASK)
            logger.info(f"[loop-start] session={join_code} epoch={epoch}")
            self._schedule_tick(join_code, epoch)

    def stop_loop(self, join_code) -> bool:
        with self._lock:
            self._loop_epochs.pop(join_code, None)
            stopped = self.scheduler.cancel(join_code, HAZARD_TASK)
        if stopped:
            logger.info(f"[loop-cancel] session={join_code}")
        return stopped

    def loop_running(self, join_code) -> bool:
        return self.scheduler.is_scheduled(join_code, HAZARD_TASK)

    def _schedule_tick(self, join_code, epoch) -> None:
        session = self.store.lookup(join_code)
        if not session or session.game_state.get('gameOver'):
            return
        variant = self.variants[session.game_name]
        interval_ms = variant.next_interval_ms(session, **self.tick_tuning)
        self.scheduler.schedule(join_code, HAZARD_TASK, interval_ms / 1000.0, self._hazard_tick, join_code, epoch)

    def _hazard_tick(self, join_code, epoch) -> None:
        with self._lock:
            if self._loop_epochs.get(join_code) != epoch:
                logger.info(f"[timer-abort] session={join_code} task={HAZARD_TASK} epoch={epoch} stale")
                return
            session = self.store.lookup(join_code)
            variant = self.variants.get(session.game_name) if session else None
            if not variant or not variant.owns_loop:
                self._loop_epochs.pop(join_code, None)
                return
            if session.game_state.get('gameOver'):
                self.stop_loop(join_code)
                return
            payload = None
            try:
                payload = variant.tick(session)
            except Exception:
                logger.exception(f"[loop-tick] session={join_code} tick failed, skipping")
            if payload:
                logger.debug(f"[loop-tick] session={join_code} hazard={payload['event']['type']}")
                self._safe_broadcast(join_code, 'game-update', payload)
            self._schedule_tick(join_code, epoch)

    def _safe_broadcast(self, join_code, event, payload) -> None:
        try:
            self.broadcast(join_code, event, payload)
        except Exception:
            logger.exception(f"[broadcast] session={join_code} event={event} failed")
