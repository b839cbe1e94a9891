# src/http_callback/core/transport.py
"""
Transport boundary.

A transport performs one blocking exchange and returns a captured
Response, or raises TransportError. It runs on engine worker threads.
"""

from abc import ABC, abstractmethod

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .exceptions import classify_requests_exception
from .request import Request
from .response import Response
from .session_manager import ThreadSafeSessionManager


class Transport(ABC):
    """Blocking request/response exchange."""

    @abstractmethod
    def send(self, request: Request, config: ClientConfig) -> Response:
        """
        Perform the exchange.

        Raises:
            TransportError: I/O failure, timeout, or oversized body
        """

    def close(self) -> None:
        """Release connections."""


class RequestsTransport(Transport):
    """
    Transport backed by requests, one Session per worker thread.

    Args:
        pool_maxsize: Connections kept per host in each session
    """

    def __init__(self, pool_maxsize: int = 10):
        self._pool_maxsize = pool_maxsize
        self._session_manager = ThreadSafeSessionManager(session_factory=self._create_session)

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(pool_maxsize=self._pool_maxsize, max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        return session

    @property
    def session(self) -> requests.Session:
        """Session of the current thread."""
        return self._session_manager.get_session()

    def send(self, request: Request, config: ClientConfig) -> Response:
        timeout = request.timeout or config.timeout.as_tuple()

        try:
            raw = self.session.request(
                method=request.method,
                url=request.url,
                params=list(request.params),
                headers=dict(request.headers),
                data=request.data,
                json=request.json_body,
                auth=request.auth,
                timeout=timeout,
                verify=config.security.verify_ssl,
                allow_redirects=config.security.allow_redirects,
                stream=True,
            )
            return Response.from_transport(raw, max_size=config.security.max_response_size)
        except requests.exceptions.RequestException as exc:
            raise classify_requests_exception(exc, request.url, timeout=timeout[1]) from exc

    def close(self) -> None:
        self._session_manager.close_all()
