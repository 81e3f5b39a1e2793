from typing import Any, Optional

from granian.rsgi import HTTPProtocol, ProtocolClosed, Scope

from ._internal import ALLOWED_METHODS, is_head, prepare_response, wire_headers
from .constants import CHUNK_SIZE, MultiRangePolicies
from .errors import ConfigurationError
from .log import logger
from .response import ShapedResponse
from .sources import BufferSource, ByteSource, FileSource, as_source


async def _stream(protocol: HTTPProtocol, source: ByteSource, response: ShapedResponse):
    trx = protocol.response_stream(response.status, wire_headers(response))
    chunks = source.aiter_window(response.window.start, response.window.end)
    try:
        async for chunk in chunks:
            await trx.send_bytes(chunk)
    except ProtocolClosed:
        logger.debug('Client disconnected, content stream interrupted')
    finally:
        await chunks.aclose()


async def send_seekable(
    scope: Scope,
    protocol: HTTPProtocol,
    content: Any,
    length: Optional[int] = None,
    content_type: Optional[str] = None,
    multi_range: MultiRangePolicies = MultiRangePolicies.reject,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    source, response = prepare_response(
        content, scope.headers.get('range'), length, content_type, multi_range, chunk_size
    )
    headers = wire_headers(response)

    if not response.has_body or is_head(scope.method):
        protocol.response_empty(response.status, headers)
    elif isinstance(source, FileSource) and response.status == 200:
        protocol.response_file(response.status, headers, str(source.path))
    elif isinstance(source, FileSource):
        protocol.response_file_range(
            response.status, headers, str(source.path), response.window.start, response.window.end + 1
        )
    elif isinstance(source, BufferSource):
        protocol.response_bytes(response.status, headers, source.slice(response.window.start, response.window.end))
    else:
        await _stream(protocol, source, response)
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

    async def __rsgi__(self, scope: Scope, protocol: HTTPProtocol):
        if scope.proto != 'http':
            protocol.close(403)
            return

        if scope.method.upper() not in ALLOWED_METHODS:
            protocol.response_empty(405, [('allow', ', '.join(ALLOWED_METHODS)), ('content-length', '0')])
            return

        await send_seekable(scope, protocol, self.source, content_type=self.content_type, multi_range=self.multi_range)

    __call__ = __rsgi__
