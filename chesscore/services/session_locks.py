"""
One lock per game session.

Requests for the same game are handled one at a time (read game -> apply -> store is not interrupted by another request).
Requests for different games never wait for each other.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID


class SessionLocks:
    def __init__(self) -> None:
        self._locks: dict[UUID, threading.Lock] = {}
        # only guards the dictionary above, never held while a game is being processed
        self._registry_lock = threading.Lock()

    def lock_for(self, game_id: UUID) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[game_id] = lock
            return lock

    @contextmanager
    def exclusive(self, game_id: UUID) -> Iterator[None]:
        """Hold the game's lock for the duration of the with-block"""
        with self.lock_for(game_id):
            yield

    def discard(self, game_id: UUID) -> None:
        """Forget the lock of a deleted game"""
        with self._registry_lock:
            self._locks.pop(game_id, None)

    def __len__(self) -> int:
        """Number of games with a lock (deleted games are discarded)"""
        with self._registry_lock:
            return len(self._locks)
