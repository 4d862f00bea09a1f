import logging
import threading
from typing import Callable, Dict, Tuple

logger = logging.getLogger(__name__)


class SessionScheduler:
    """Per-session delayed tasks run as Socket.IO background tasks.

    Tasks are keyed by ``(join_code, name)`` and a key holds at most one live
    task: scheduling again supersedes the earlier one. Each task carries a
    generation token; when it wakes up with a stale token it does nothing, so
    cancellation never has to interrupt a sleeping worker.

    ``runner`` is anything exposing ``start_background_task`` and ``sleep``,
    normally the ``SocketIO`` instance.
    """

    def __init__(self, runner):
        self.runner = runner
        self._tokens: Dict[Tuple[str, str], int] = {}
        self._generation = 0
        self._lock = threading.Lock()

    def schedule(self, join_code: str, name: str, delay_sec: float, fn: Callable, *args) -> int:
        key = (join_code, name)
        with self._lock:
            self._generation += 1
            token = self._generation
            self._tokens[key] = token
        logger.debug(f"[timer-set] session={join_code} task={name} delay={delay_sec:.3f}s token={token}")
        self.runner.start_background_task(self._worker, key, token, delay_sec, fn, args)
        return token

    def cancel(self, join_code: str, name: str = None) -> bool:
        """Cancel one task, or every task of the session when ``name`` is None."""
        with self._lock:
            if name is not None:
                keys = [(join_code, name)] if (join_code, name) in self._tokens else []
            else:
                keys = [k for k in self._tokens if k[0] == join_code]
            for key in keys:
                del self._tokens[key]
        for key in keys:
            logger.info(f"[timer-cancel] session={key[0]} task={key[1]}")
        return bool(keys)

    def is_scheduled(self, join_code: str, name: str) -> bool:
        return (join_code, name) in self._tokens

    def _worker(self, key, token, delay_sec, fn, args):
        if delay_sec > 0:
            self.runner.sleep(delay_sec)
        with self._lock:
            if self._tokens.get(key) != token:
                live = False
            else:
                del self._tokens[key]
                live = True
        if not live:
            logger.debug(f"[timer-abort] session={key[0]} task={key[1]} token={token} superseded")
            return
        try:
            fn(*args)
        except Exception:
            # A failing task must not take the worker down with it
            logger.exception(f"[timer-error] session={key[0]} task={key[1]}")
