"""
Deferred chat replies

Replies are timers keyed by reservation id so they can be cancelled per
reservation, or fired immediately when a caller needs deterministic timing.
Inside an event loop they are asyncio timers. Plain synchronous callers get a
daemon ``threading.Timer`` instead.
"""

import asyncio
import itertools
import logging
import threading
from typing import Callable, Optional, Union

from ...config import CHAT_AUTO_REPLY_DELAY_MS

logger = logging.getLogger(__name__)

TimerLike = Union[asyncio.TimerHandle, threading.Timer]


class ReplyScheduler:
    """Schedules callbacks after a fixed delay"""

    def __init__(
        self,
        delay_ms: int = CHAT_AUTO_REPLY_DELAY_MS,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.delay_ms = delay_ms
        self._loop = loop
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        # reservation id -> {token: (timer, callback)}
        self._pending: dict[str, dict[int, tuple[TimerLike, Callable[[], None]]]] = {}

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _start_timer(self, reservation_id: str, token: int) -> TimerLike:
        delay = self.delay_ms / 1000
        loop = self._resolve_loop()
        if loop is not None:
            return loop.call_later(delay, self._fire, reservation_id, token)

        timer = threading.Timer(delay, self._fire, args=(reservation_id, token))
        timer.daemon = True
        timer.start()
        return timer

    def schedule(self, reservation_id: str, callback: Callable[[], None]) -> int:
        """
        Run ``callback`` once after the delay.

        Uses the loop given at construction, otherwise the running loop,
        otherwise a background timer thread.

        Returns:
            int: token identifying this scheduled reply
        """
        token = next(self._tokens)
        # Registered under the lock so a short timer cannot fire before it is known
        with self._lock:
            timer = self._start_timer(reservation_id, token)
            self._pending.setdefault(reservation_id, {})[token] = (timer, callback)
        logger.debug(f"⏱️ Reply {token} for {reservation_id} due in {self.delay_ms}ms")
        return token

    def pending(self, reservation_id: Optional[str] = None) -> int:
        with self._lock:
            if reservation_id is not None:
                return len(self._pending.get(reservation_id, {}))
            return sum(len(entries) for entries in self._pending.values())

    def cancel(self, reservation_id: str) -> int:
        """Cancel every pending reply for a reservation; returns how many"""
        with self._lock:
            entries = self._pending.pop(reservation_id, {})
        for timer, _ in entries.values():
            timer.cancel()
        if entries:
            logger.info(f"🛑 Cancelled {len(entries)} pending replies for {reservation_id}")
        return len(entries)

    def cancel_all(self) -> int:
        with self._lock:
            reservation_ids = list(self._pending)
        return sum(self.cancel(reservation_id) for reservation_id in reservation_ids)

    def fire_pending(self, reservation_id: Optional[str] = None) -> int:
        """Run pending replies now, in scheduling order, instead of waiting"""
        due = []
        with self._lock:
            keys = [reservation_id] if reservation_id is not None else list(self._pending)
            for key in keys:
                for token, (timer, _) in self._pending.get(key, {}).items():
                    timer.cancel()
                    due.append((token, key))
        for token, key in sorted(due):
            self._fire(key, token)
        return len(due)

    def _fire(self, reservation_id: str, token: int) -> None:
        with self._lock:
            entries = self._pending.get(reservation_id)
            if not entries or token not in entries:
                return
            _, callback = entries.pop(token)
            if not entries:
                del self._pending[reservation_id]

        try:
            callback()
        except Exception as e:
            # Runs outside any caller, so there is nobody to propagate to
            logger.exception(f"❌ Scheduled reply {token} for {reservation_id} failed: {e}")
