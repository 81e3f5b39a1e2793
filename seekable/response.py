from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .constants import MultiRangePolicies, RangeKinds
from .http import ResourceDescriptor
from .range import ResolvedRange


@dataclass(frozen=True)
class ByteWindow:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class ShapedResponse:
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    window: Optional[ByteWindow] = None

    @property
    def has_body(self) -> bool:
        return self.window is not None

    def header_items(self) -> List[Tuple[str, str]]:
        return list(self.headers.items())


def _base_headers(descriptor: ResourceDescriptor, content_length: int) -> Dict[str, str]:
    headers = {'accept-ranges': 'bytes', 'content-length': str(content_length)}
    if descriptor.content_type:
        headers['content-type'] = descriptor.content_type
    return headers


def _full(descriptor: ResourceDescriptor) -> ShapedResponse:
    window = ByteWindow(0, descriptor.length - 1) if descriptor.length else None
    return ShapedResponse(200, _base_headers(descriptor, descriptor.length), window)


def _rejected(descriptor: ResourceDescriptor) -> ShapedResponse:
    headers = _base_headers(descriptor, descriptor.length)
    headers['content-range'] = f'*/{descriptor.length}'
    return ShapedResponse(416, headers)


def shape(
    descriptor: ResourceDescriptor,
    resolved: ResolvedRange,
    multi_range: MultiRangePolicies = MultiRangePolicies.reject,
) -> ShapedResponse:
    """
    Compute status, headers and byte window for a resolved range.

    `Content-Length` advertises the resource length on every outcome but
    206, where it is the window length.
    """
    if resolved.kind == RangeKinds.absent:
        return _full(descriptor)

    if resolved.kind == RangeKinds.satisfiable:
        window = ByteWindow(resolved.start, resolved.end)
        headers = _base_headers(descriptor, len(window))
        headers['content-range'] = f'bytes {window.start}-{window.end}/{descriptor.length}'
        return ShapedResponse(206, headers, window)

    if resolved.kind == RangeKinds.unsatisfiable:
        return _rejected(descriptor)

    if resolved.kind == RangeKinds.multi:
        if multi_range == MultiRangePolicies.ignore:
            return _full(descriptor)
        return _rejected(descriptor)

    return ShapedResponse(400, _base_headers(descriptor, descriptor.length))
