# src/http_callback/core/session_manager.py
"""
Thread-local requests.Session storage for the transport.

Worker threads of the engine pool each get their own Session; the
manager keeps weak references so close_all() can reach every one.
"""
import threading
import weakref
from typing import Callable, Set

import requests


class ThreadSafeSessionManager:
    """
    Manages one lazily created requests.Session per thread.

    Example:
        >>> manager = ThreadSafeSessionManager(requests.Session)
        >>> session = manager.get_session()
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._all_sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.Lock()

    def get_session(self) -> requests.Session:
        """Session for the current thread, created on first use."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._all_sessions.add(weakref.ref(session, self._forget))
        return session

    def _forget(self, ref: weakref.ref):
        with self._sessions_lock:
            self._all_sessions.discard(ref)

    def close_all(self):
        """Close sessions of all threads. Safe to call multiple times."""
        self._local.session = None
        with self._sessions_lock:
            refs = list(self._all_sessions)
            self._all_sessions.clear()

        for ref in refs:
            session = ref()
            if session is not None:
                session.close()

    def get_active_sessions_count(self) -> int:
        """Number of sessions still alive across all threads."""
        with self._sessions_lock:
            return sum(1 for ref in self._all_sessions if ref() is not None)
