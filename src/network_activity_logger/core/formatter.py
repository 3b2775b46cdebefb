"""
Rendering of lifecycle events into activity records.

All functions here are pure: the same inputs always give the same Record (or
None when the level suppresses the phase).
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional
from urllib.parse import urlsplit

from .config import LoggerLevel
from .events import RequestInfo, ResponseInfo
from .exceptions import BodyDecodeError, describe_transport_error
from ..utils.sanitizer import mask_headers, mask_url

MAX_IDENTIFIER_LENGTH = 150

# Path separators plus characters that are not allowed in file names on
# common platforms
_UNSAFE_CHARS = re.compile(r'[/\\:*?"<>|\x00-\x1f]')


class Phase(str, Enum):
    """Lifecycle phase a record describes."""
    STARTED = "started"
    FINISHED = "finished"


@dataclass(frozen=True)
class Record:
    """
    One rendered activity record.

    Attributes:
        identifier: Normalized path + query, shared by the start and finish
                    record of a request
        body: Text to write
        is_reply: True for finish records
        is_error: True for transport error records
    """
    identifier: str
    body: str
    is_reply: bool = False
    is_error: bool = False


def make_identifier(url: str) -> str:
    """
    Normalized, file-name-safe identifier from the URL path and query.

    Examples:
        >>> make_identifier("http://example.com/foo/bar.json")
        'foo_bar.json'
        >>> make_identifier("https://api.example.com/users?page=2")
        'users_page=2'
        >>> make_identifier("https://api.example.com/")
        'root'
    """
    parts = urlsplit(url)
    raw = parts.path
    if parts.query:
        raw += "?" + parts.query

    identifier = _UNSAFE_CHARS.sub("_", raw.lstrip("/"))
    identifier = identifier.strip(" .") or "root"
    return identifier[:MAX_IDENTIFIER_LENGTH]


def format_elapsed(elapsed: float) -> str:
    """Seconds with exactly four decimals."""
    return f"{max(0.0, elapsed):.4f}"


def decode_body(body: Optional[bytes]) -> str:
    """
    Decode body bytes as UTF-8 text.

    Raises:
        BodyDecodeError: body is missing, empty or not valid UTF-8
    """
    if not body:
        raise BodyDecodeError("Body is empty")
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BodyDecodeError(f"Body is not UTF-8 text: {e.reason}", size=len(body))


def render_response_body(body: Optional[bytes]) -> Optional[str]:
    """
    Pretty-printed JSON if the body parses, else the raw text, else None.
    """
    try:
        text = decode_body(body)
    except BodyDecodeError:
        return None

    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def _header_lines(headers: Mapping[str, str], mask_sensitive: bool) -> List[str]:
    if mask_sensitive:
        headers = mask_headers(headers)
    return [f"{key}: {value}" for key, value in headers.items()]


def _display_url(request: RequestInfo, mask_sensitive: bool) -> str:
    return mask_url(request.url) if mask_sensitive else request.url


def format_started(
    request: RequestInfo,
    level: LoggerLevel,
    mask_sensitive: bool = False
) -> Optional[Record]:
    """Start record, or None unless level is DEBUG or INFO."""
    url = _display_url(request, mask_sensitive)
    identifier = make_identifier(url)

    if level is LoggerLevel.DEBUG:
        lines = [f"{request.method} '{url}':"]
        lines.extend(_header_lines(request.headers, mask_sensitive))
        try:
            lines.append(decode_body(request.body))
        except BodyDecodeError:
            pass
        return Record(identifier, "\n".join(lines))

    if level is LoggerLevel.INFO:
        return Record(identifier, f"{request.method} '{url}'")

    return None


def format_completed(
    request: RequestInfo,
    response: ResponseInfo,
    level: LoggerLevel,
    elapsed: float,
    mask_sensitive: bool = False
) -> Optional[Record]:
    """Successful finish record, or None unless level is DEBUG or INFO."""
    url = _display_url(request, mask_sensitive)
    identifier = make_identifier(url)
    summary = f"{response.status_code} '{url}' [{format_elapsed(elapsed)} s]"

    if level is LoggerLevel.DEBUG:
        lines = [summary + ":"]
        lines.extend(_header_lines(response.headers, mask_sensitive))
        body = render_response_body(response.body)
        if body is not None:
            lines.append(body)
        return Record(identifier, "\n".join(lines), is_reply=True)

    if level is LoggerLevel.INFO:
        return Record(identifier, summary, is_reply=True)

    return None


def format_failed(
    request: RequestInfo,
    error: BaseException,
    level: LoggerLevel,
    elapsed: float,
    mask_sensitive: bool = False
) -> Optional[Record]:
    """Transport error record for DEBUG, INFO, WARN and ERROR; else None."""
    if not level.logs_failures:
        return None

    url = _display_url(request, mask_sensitive)
    description = describe_transport_error(error)
    if mask_sensitive:
        description = mask_url(description)

    body = (
        f"[Error] {request.method} '{url}' [{format_elapsed(elapsed)} s]:\n"
        f"{description}"
    )
    return Record(make_identifier(url), body, is_reply=True, is_error=True)


def format_record(
    phase: Phase,
    level: LoggerLevel,
    request: RequestInfo,
    response: Optional[ResponseInfo] = None,
    elapsed: float = 0.0,
    error: Optional[BaseException] = None,
    mask_sensitive: bool = False
) -> Optional[Record]:
    """
    Render one lifecycle phase at the given level.

    For Phase.FINISHED an error takes precedence over a response; with
    neither there is nothing to render.

    Returns:
        Record, or None when this level/phase combination emits nothing

    Example:
        >>> req = RequestInfo("GET", "http://example.com/foo/bar.json")
        >>> format_record(Phase.STARTED, LoggerLevel.INFO, req).body
        "GET 'http://example.com/foo/bar.json'"
    """
    level = LoggerLevel(level)

    if phase is Phase.STARTED:
        return format_started(request, level, mask_sensitive)

    if error is not None:
        return format_failed(request, error, level, elapsed, mask_sensitive)

    if response is not None:
        return format_completed(request, response, level, elapsed, mask_sensitive)

    return None
