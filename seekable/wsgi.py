from http import HTTPStatus
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ._internal import ALLOWED_METHODS, is_head, prepare_response, wire_headers
from .constants import CHUNK_SIZE, MultiRangePolicies
from .errors import ConfigurationError
from .sources import as_source


StartResponse = Callable[[str, List[Tuple[str, str]]], Any]


def _status_line(status: int) -> str:
    return f'{status} {HTTPStatus(status).phrase}'


def send_seekable(
    environ: Dict[str, Any],
    start_response: StartResponse,
    content: Any,
    length: Optional[int] = None,
    content_type: Optional[str] = None,
    multi_range: MultiRangePolicies = MultiRangePolicies.reject,
    chunk_size: int = CHUNK_SIZE,
) -> Iterable[bytes]:
    source, response = prepare_response(
        content, environ.get('HTTP_RANGE'), length, content_type, multi_range, chunk_size
    )
    start_response(_status_line(response.status), wire_headers(response))

    if not response.has_body or is_head(environ['REQUEST_METHOD']):
        return []
    return source.iter_window(response.window.start, response.window.end)


class SeekableApp:
    def __init__(
        self,
        content: Any,
        content_type: Optional[str] = None,
        multi_range: MultiRangePolicies = MultiRangePolicies.reject,
        chunk_size: int = CHUNK_SIZE,
    ):
        self.source = as_source(content, chunk_size=chunk_size)
        if not self.source.restartable:
            raise ConfigurationError('applications can only serve restartable content (buffers or files)')
        self.content_type = content_type
        self.multi_range = multi_range

    def __call__(self, environ: Dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        if environ['REQUEST_METHOD'].upper() not in ALLOWED_METHODS:
            start_response(_status_line(405), [('allow', ', '.join(ALLOWED_METHODS)), ('content-length', '0')])
            return []

        return send_seekable(
            environ, start_response, self.source, content_type=self.content_type, multi_range=self.multi_range
        )
