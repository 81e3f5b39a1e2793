from .constants import MultiRangePolicies, RangeKinds
from .errors import ConfigurationError, SeekableError, SourceError
from .http import ResourceDescriptor
from .range import ResolvedRange, parse_content_range, parse_range_header, resolve
from .response import ByteWindow, ShapedResponse, shape
from .sources import BufferSource, ByteSource, FileSource, StreamSource, as_source


__version__ = '1.0.0'
