# src/http_req/core/session_manager.py
"""
Thread-safe session management for Client.

Each thread gets its own requests.Session. The session class carries the
redirect policy: with skip_redirects enabled, its per-redirect hook refuses
every redirect instead of following it.
"""
import threading
from typing import Callable, Optional, Set
import weakref

import requests

from .exceptions import RedirectSkippedError


class TransportSession(requests.Session):
    """
    requests.Session with a redirect refusal switch.

    requests asks get_redirect_target() before following each redirect.
    When skip_redirects is set, any redirect target aborts the request with
    RedirectSkippedError, so the 3xx surfaces as a transport error.
    """

    def __init__(self, skip_redirects: bool = False):
        super().__init__()
        self.skip_redirects = skip_redirects

    def get_redirect_target(self, resp: requests.Response) -> Optional[str]:
        location = super().get_redirect_target(resp)
        if location and self.skip_redirects:
            url = resp.url
            status_code = resp.status_code
            resp.close()
            raise RedirectSkippedError(url, location=location, status_code=status_code)
        return location


class ThreadSafeSessionManager:
    """
    Manages thread-local session instances.

    Sessions are lazily created on first access per thread and tracked with
    weak references so close_all() can reach every thread's session.

    Example:
        >>> manager = ThreadSafeSessionManager(session_factory)
        >>> session = manager.get_session()  # Gets thread-local session
        >>> manager.close_all()  # Closes all sessions from all threads
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        """
        Initialize the session manager.

        Args:
            session_factory: Callable that creates and configures a new Session
        """
        self._session_factory = session_factory
        self._local = threading.local()

        self._all_sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.RLock()

    def get_session(self) -> requests.Session:
        """Get thread-local session, creating it lazily if needed."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session

            with self._sessions_lock:
                self._all_sessions.add(weakref.ref(session, self._discard_ref))

        return session

    def _discard_ref(self, ref: weakref.ref):
        with self._sessions_lock:
            self._all_sessions.discard(ref)

    def close_all(self):
        """
        Close all sessions from all threads.

        Safe to call multiple times.
        """
        self._local.session = None

        with self._sessions_lock:
            refs = list(self._all_sessions)
            self._all_sessions.clear()

        for ref in refs:
            session = ref()
            if session is not None:
                session.close()

    def get_active_sessions_count(self) -> int:
        """Count of sessions that are still alive."""
        with self._sessions_lock:
            return sum(1 for ref in self._all_sessions if ref() is not None)
