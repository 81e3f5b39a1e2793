"""HTTP Range header resolution according to RFC 7233, restricted to a single byte range."""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import RangeKinds


_positions = re.compile(r'[0-9]+')
_content_range = re.compile(r'bytes\s+([0-9]+)-([0-9]+)/([0-9]+)', re.IGNORECASE)


@dataclass(frozen=True)
class ResolvedRange:
    kind: RangeKinds
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def is_satisfiable(self) -> bool:
        return self.kind == RangeKinds.satisfiable


ABSENT = ResolvedRange(RangeKinds.absent)
UNSATISFIABLE = ResolvedRange(RangeKinds.unsatisfiable)
MALFORMED = ResolvedRange(RangeKinds.malformed)
MULTI_RANGE = ResolvedRange(RangeKinds.multi)


def satisfiable(start: int, end: int) -> ResolvedRange:
    return ResolvedRange(RangeKinds.satisfiable, start, end)


def _position(value: str) -> Optional[int]:
    if not _positions.fullmatch(value):
        return None
    return int(value)


def parse_range_header(range_header: Optional[str]) -> Optional[List[Tuple[Optional[int], Optional[int]]]]:
    """
    Parse the syntax of an HTTP Range header.

    Args:
        range_header: The Range header value (e.g., "bytes=0-499")

    Returns:
        List of (first, last) tuples where:
        - (first, last): Range from first to last (inclusive)
        - (first, None): Range from first to end of entity
        - (None, suffix): Last suffix bytes of entity
        - None: Invalid or missing header

    Examples:
        >>> parse_range_header("bytes=0-499")
        [(0, 499)]
        >>> parse_range_header("bytes=500-")
        [(500, None)]
        >>> parse_range_header("bytes=-500")
        [(None, 500)]
        >>> parse_range_header("bytes=0-49,50-99")
        [(0, 49), (50, 99)]
    """
    if not range_header:
        return None

    range_header = range_header.strip()

    unit, sep, ranges_str = range_header.partition('=')
    if not sep or unit.strip().lower() != 'bytes':
        return None

    ranges_str = ranges_str.strip()
    if not ranges_str:
        return None

    ranges = []

    for spec in ranges_str.split(','):
        spec = spec.strip()
        if spec.count('-') != 1:
            return None

        first_str, last_str = (part.strip() for part in spec.split('-', 1))

        if not first_str:
            # "-500": suffix range
            suffix = _position(last_str)
            if suffix is None:
                return None
            ranges.append((None, suffix))
            continue

        first = _position(first_str)
        if first is None:
            return None
        if not last_str:
            # "500-": from first to end
            ranges.append((first, None))
            continue

        last = _position(last_str)
        if last is None:
            return None
        ranges.append((first, last))

    return ranges


def resolve(length: int, range_header: Optional[str]) -> ResolvedRange:
    """
    Resolve a Range header against a resource of `length` bytes.

    Out of bounds last positions and oversized suffixes are clamped to the
    resource, while first positions past its end are unsatisfiable.

    Examples:
        >>> resolve(34, None)
        ResolvedRange(kind=<RangeKinds.absent: 'absent'>, start=None, end=None)
        >>> resolve(34, "bytes=0-999")
        ResolvedRange(kind=<RangeKinds.satisfiable: 'satisfiable'>, start=0, end=33)
    """
    if range_header is None or not range_header.strip():
        return ABSENT

    specs = parse_range_header(range_header)
    if specs is None:
        return MALFORMED
    if len(specs) > 1:
        return MULTI_RANGE

    first, last = specs[0]
    if first is None:
        start = max(0, length - last)
        end = length - 1
    else:
        start = first
        end = length - 1 if last is None else min(last, length - 1)

    if length == 0 or start > end or start >= length:
        return UNSATISFIABLE
    return satisfiable(start, end)


def parse_content_range(value: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """Read back a `bytes start-end/total` Content-Range value, None for anything else."""
    if not value:
        return None
    match = _content_range.fullmatch(value.strip())
    if not match:
        return None
    start, end, total = (int(group) for group in match.groups())
    if start > end or end >= total:
        return None
    return start, end, total
