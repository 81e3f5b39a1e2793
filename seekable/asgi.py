from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ._internal import ALLOWED_METHODS, is_head, prepare_response, wire_headers
from .constants import CHUNK_SIZE, MultiRangePolicies
from .errors import ConfigurationError
from .sources import as_source


Scope = Dict[str, Any]
Receive = Callable[[], Awaitable[Dict[str, Any]]]
Send = Callable[[Dict[str, Any]], Awaitable[None]]


def _encode_headers(headers: List[Tuple[str, str]]) -> List[Tuple[bytes, bytes]]:
    return [(key.encode('latin-1'), value.encode('latin-1')) for key, value in headers]


def _range_header(scope: Scope) -> Optional[str]:
    values = [value.decode('latin-1') for key, value in scope.get('headers', []) if key.lower() == b'range']
    return ', '.join(values) if values else None


async def send_seekable(
    scope: Scope,
    send: Send,
    content: Any,
    length: Optional[int] = None,
    content_type: Optional[str] = None,
    multi_range: MultiRangePolicies = MultiRangePolicies.reject,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    source, response = prepare_response(content, _range_header(scope), length, content_type, multi_range, chunk_size)
    await send(
        {
            'type': 'http.response.start',
            'status': response.status,
            'headers': _encode_headers(wire_headers(response)),
        }
    )

    if response.has_body and not is_head(scope['method']):
        chunks = source.aiter_window(response.window.start, response.window.end)
        try:
            async for chunk in chunks:
                await send({'type': 'http.response.body', 'body': chunk, 'more_body': True})
        finally:
            await chunks.aclose()

    await send({'type': 'http.response.body', 'body': b'', 'more_body': False})
    return response.status


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

    async def _lifespan(self, receive: Receive, send: Send):
        while True:
            message = await receive()
            if message['type'] == 'lifespan.startup':
                await send({'type': 'lifespan.startup.complete'})
            elif message['type'] == 'lifespan.shutdown':
                await send({'type': 'lifespan.shutdown.complete'})
                return

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope['type'] == 'lifespan':
            return await self._lifespan(receive, send)
        if scope['type'] != 'http':
            return

        if scope['method'].upper() not in ALLOWED_METHODS:
            await send(
                {
                    'type': 'http.response.start',
                    'status': 405,
                    'headers': [(b'allow', b', '.join(m.encode() for m in ALLOWED_METHODS)), (b'content-length', b'0')],
                }
            )
            await send({'type': 'http.response.body', 'body': b'', 'more_body': False})
            return

        await send_seekable(scope, send, self.source, content_type=self.content_type, multi_range=self.multi_range)
