"""
Иерархия исключений Network Activity Logger.

Ни одно из этих исключений не выходит за пределы логгера во время обработки
событий: они поднимаются внутренними компонентами и перехватываются
оркестратором (см. NetworkActivityLogger).
"""

from typing import Optional

import httpx
import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NetworkActivityLoggerException(Exception):
    """Базовое исключение Network Activity Logger."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# EVENT / BODY ERRORS (recovered locally)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MalformedEventError(NetworkActivityLoggerException):
    """
    Событие жизненного цикла без обязательных полей.

    Args:
        message: Сообщение
        field: Имя отсутствующего/невалидного поля
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        msg = message
        if field:
            msg += f" (field: {field})"
        super().__init__(msg)

class BodyDecodeError(NetworkActivityLoggerException):
    """Тело запроса/ответа не является текстом."""

    def __init__(self, message: str, size: int = 0):
        self.size = size
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SINK ERRORS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class SinkIOError(NetworkActivityLoggerException, OSError):
    """
    Ошибка записи в sink (консоль или файл).

    Args:
        message: Сообщение
        path: Путь к файлу (для файловых sink'ов)
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        msg = message
        if path:
            msg += f" (path: {path})"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONFIGURATION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(NetworkActivityLoggerException, ValueError):
    """Ошибка конфигурации."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_transport_error(exc: BaseException) -> str:
    """
    Короткая метка для транспортной ошибки requests/httpx.

    Args:
        exc: Исключение транспорта

    Returns:
        Метка ("Request timeout", "Proxy error", "Connection error")
        или имя класса исключения для остальных случаев

    Examples:
        >>> classify_transport_error(requests.exceptions.ConnectTimeout())
        'Request timeout'
        >>> classify_transport_error(ValueError("boom"))
        'ValueError'
    """
    # Timeout проверяется первым: ConnectTimeout наследует ConnectionError
    if isinstance(exc, (requests.exceptions.Timeout, httpx.TimeoutException)):
        return "Request timeout"

    elif isinstance(exc, (requests.exceptions.ProxyError, httpx.ProxyError)):
        return "Proxy error"

    elif isinstance(exc, (requests.exceptions.ConnectionError, httpx.NetworkError)):
        return "Connection error"

    else:
        return type(exc).__name__


def describe_transport_error(exc: BaseException) -> str:
    """
    Человекочитаемое описание транспортной ошибки для записи [Error].

    Examples:
        >>> describe_transport_error(httpx.ConnectError("refused"))
        'Connection error: refused'
        >>> describe_transport_error(RuntimeError())
        'RuntimeError'
    """
    label = classify_transport_error(exc)
    message = str(exc)
    if not message:
        return label
    return f"{label}: {message}"
