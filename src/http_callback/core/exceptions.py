"""
Иерархия исключений HTTP Callback.

Классификация:
- RequestError - ошибка конкретного запроса, доставляется ТОЛЬКО через Failure
  - TransportError - нет ответа (таймаут, соединение, SSL)
  - HTTPStatusError - ответ есть, но статус не прошёл валидацию
  - DeserializationError - ответ есть, но декодер упал
- CallbackDispatchError - фатальная ошибка интеграции (executor отказал)
"""

from typing import TYPE_CHECKING, Optional

import requests

if TYPE_CHECKING:
    from .response import Response

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPCallbackException(Exception):
    """Базовое исключение HTTP Callback."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)


class RequestError(HTTPCallbackException):
    """
    Ошибка выполнения запроса.

    Единственный тип ошибки в Failure. Хранит исходную причину и,
    если он был получен, объект Response.

    Args:
        message: Сообщение об ошибке
        cause: Исходное исключение (транспорт или декодер)
        response: Ответ, вызвавший ошибку (None для транспортных ошибок)
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        response: Optional['Response'] = None,
    ):
        self.cause = cause
        self.response = response
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def status_code(self) -> Optional[int]:
        """HTTP статус ответа, если ответ был получен."""
        return self.response.status_code if self.response is not None else None

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TRANSPORT (ответа нет)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(RequestError):
    """Сетевая ошибка: обмен не завершился, Response отсутствует."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message, cause=cause)


class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Значение таймаута
        cause: Исходное исключение requests
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        cause: Optional[BaseException] = None,
    ):
        self.timeout = timeout
        msg = message
        if timeout:
            msg += f" (timeout: {timeout}s)"
        super().__init__(msg, url, cause=cause)


class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - DNS resolution failed
    """
    pass


class SSLError(TransportError):
    """Ошибка TLS рукопожатия или проверки сертификата."""
    pass


class ResponseTooLargeError(TransportError):
    """
    Ответ слишком большой.

    Args:
        size: Размер ответа (bytes)
        max_size: Максимально допустимый размер
        url: URL
    """

    def __init__(self, size: int, max_size: int, url: Optional[str] = None):
        self.size = size
        self.max_size = max_size
        super().__init__(f"Response too large: {size} bytes (max: {max_size})", url)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP STATUS (ответ есть)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPStatusError(RequestError):
    """
    Статус ответа вне допустимого диапазона.

    Args:
        status_code: HTTP статус
        url: URL
        response: Полученный ответ
        message: Дополнительное сообщение
    """

    def __init__(
        self,
        status_code: int,
        url: str,
        response: Optional['Response'] = None,
        message: str = "",
    ):
        self.url = url
        self._status_code = status_code

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg, response=response)

    @property
    def status_code(self) -> int:
        return self._status_code


class BadRequestError(HTTPStatusError):
    """400 Bad Request."""

    def __init__(self, url: str, response: Optional['Response'] = None, message: str = ""):
        super().__init__(400, url, response, message)


class UnauthorizedError(HTTPStatusError):
    """401 Unauthorized."""

    def __init__(self, url: str, response: Optional['Response'] = None, message: str = ""):
        super().__init__(401, url, response, message)


class ForbiddenError(HTTPStatusError):
    """403 Forbidden."""

    def __init__(self, url: str, response: Optional['Response'] = None, message: str = ""):
        super().__init__(403, url, response, message)


class NotFoundError(HTTPStatusError):
    """404 Not Found."""

    def __init__(self, url: str, response: Optional['Response'] = None, message: str = ""):
        super().__init__(404, url, response, message)


class ServerError(HTTPStatusError):
    """5xx ошибка сервера."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DECODE (ответ есть, декодер упал)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class DeserializationError(RequestError):
    """
    Ошибка десериализации ответа.

    Примеры:
    - Битый JSON
    - Невалидная кодировка
    - Исключение в пользовательском декодере
    """
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CallbackDispatchError(HTTPCallbackException):
    """
    Callback executor отказался принять задачу.

    Ошибка интеграции, не ретраится. Логируется как CRITICAL и
    пробрасывается из ExecutionEngine.wait() / HTTPCallbackClient.close().
    """

    def __init__(self, message: str, request=None, cause: Optional[BaseException] = None):
        self.request = request
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class ConfigurationError(HTTPCallbackException):
    """Ошибка конфигурации."""

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None,
) -> TransportError:
    """
    Конвертировать requests.exceptions в транспортные исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса
        timeout: Таймаут запроса (для сообщения)

    Returns:
        TransportError с сохранённой причиной

    Examples:
        >>> exc = requests.exceptions.ReadTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.cause is exc
    """

    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, timeout=timeout, cause=exc)

    elif isinstance(exc, requests.exceptions.SSLError):
        return SSLError("SSL error", url, cause=exc)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError("Connection error", url, cause=exc)

    else:
        return TransportError(f"Request failed: {exc}", url, cause=exc)


def classify_status(response: 'Response') -> HTTPStatusError:
    """
    Построить HTTPStatusError по статусу ответа.

    Args:
        response: Ответ, не прошедший валидацию статуса

    Returns:
        Подкласс HTTPStatusError с прикреплённым ответом
    """
    status_code = response.status_code
    url = response.url
    message = response.reason or ""

    if status_code == 400:
        return BadRequestError(url, response, message)
    elif status_code == 401:
        return UnauthorizedError(url, response, message)
    elif status_code == 403:
        return ForbiddenError(url, response, message)
    elif status_code == 404:
        return NotFoundError(url, response, message)
    elif 500 <= status_code < 600:
        return ServerError(status_code, url, response, message)
    else:
        return HTTPStatusError(status_code, url, response, message)
