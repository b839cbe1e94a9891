# src/http_callback/utils/sanitizer.py
"""
Утилита для маскирования чувствительных данных в логах.

Защищает пароли, токены и API ключи в заголовках, URL и
дополнительных полях записей лога.
"""

import re
from typing import Any, Dict
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

MASK = "***REDACTED***"

# Список чувствительных полей (case-insensitive, частичное совпадение)
SENSITIVE_KEYS = {
    'password', 'passwd', 'pwd',
    'token', 'access_token', 'refresh_token', 'jwt',
    'secret', 'client_secret', 'api_secret',
    'api_key', 'apikey', 'private_key',
    'authorization', 'auth',
    'cookie', 'session', 'csrf',
    'credentials',
}

# Регулярные выражения для обнаружения sensitive данных в строках
SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    (re.compile(r'(://[^:/@\s]+:)([^@/\s]+)(@)'), r'\1' + MASK + r'\3'),
]


def _is_sensitive_key(key: str) -> bool:
    key = key.lower()
    return any(sensitive in key for sensitive in SENSITIVE_KEYS)


def mask_sensitive_data(data: Any, mask: str = MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Accept": "*/*"})
        {'Authorization': '***REDACTED***', 'Accept': '*/*'}
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        for pattern, replacement in SENSITIVE_PATTERNS:
            data = pattern.sub(replacement.replace(MASK, mask), data)
        return data

    if isinstance(data, dict):
        return {
            key: mask if _is_sensitive_key(str(key)) else mask_sensitive_data(value, mask)
            for key, value in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    return data


def mask_headers(headers: Dict[str, str], mask: str = MASK) -> Dict[str, str]:
    """Маскирует чувствительные HTTP заголовки."""
    return {
        name: mask if _is_sensitive_key(name) else value
        for name, value in headers.items()
    }


def mask_url(url: str, mask: str = MASK) -> str:
    """
    Маскирует чувствительные query параметры и пароль в userinfo.

    Examples:
        >>> mask_url("https://api.example.com/data?api_key=secret&page=1")
        'https://api.example.com/data?api_key=***REDACTED***&page=1'
    """
    if not url:
        return url

    url = mask_sensitive_data(url, mask)
    parsed = urlparse(url)
    if not parsed.query:
        return url

    pairs = [
        (name, mask if _is_sensitive_key(name) else value)
        for name, value in parse_qsl(parsed.query, keep_blank_values=True)
    ]
    return urlunparse(parsed._replace(query=urlencode(pairs, safe='*')))


def add_sensitive_keys(*keys: str) -> None:
    """Добавляет ключи в глобальный список SENSITIVE_KEYS."""
    for key in keys:
        SENSITIVE_KEYS.add(key.lower())
