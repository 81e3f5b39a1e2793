from typing import Any, List, Optional, Tuple

from .constants import CHUNK_SIZE, MultiRangePolicies
from .errors import ConfigurationError
from .http import ResourceDescriptor
from .log import logger
from .range import resolve
from .response import ShapedResponse, shape
from .sources import ByteSource, as_source


def prepare_response(
    content: Any,
    range_header: Optional[str],
    length: Optional[int] = None,
    content_type: Optional[str] = None,
    multi_range: MultiRangePolicies = MultiRangePolicies.reject,
    chunk_size: int = CHUNK_SIZE,
) -> Tuple[ByteSource, ShapedResponse]:
    source = as_source(content, length, chunk_size=chunk_size)
    if length is not None and source.restartable and length != source.length:
        raise ConfigurationError(f'`length` is {length} but the content holds {source.length} bytes')
    descriptor = ResourceDescriptor.from_config(
        {'length': source.length if length is None else length, 'type': content_type}
    )
    resolved = resolve(descriptor.length, range_header)
    response = shape(descriptor, resolved, multi_range)
    logger.debug(f'Range {range_header!r} over {descriptor.length} bytes: {resolved.kind} -> {response.status}')
    return source, response


def wire_headers(response: ShapedResponse) -> List[Tuple[str, str]]:
    """Response headers as sent: outcomes without a body are framed with a zero `content-length`."""
    if response.has_body:
        return response.header_items()
    return [(key, '0' if key == 'content-length' else value) for key, value in response.header_items()]


def is_head(method: str) -> bool:
    return method.upper() == 'HEAD'


ALLOWED_METHODS = ('GET', 'HEAD')
