from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import ConfigurationError


@dataclass(frozen=True)
class ResourceDescriptor:
    length: int
    content_type: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise ConfigurationError(f'`length` must be an integer, got {self.length!r}')
        if self.length < 0:
            raise ConfigurationError(f'`length` must be non-negative, got {self.length}')

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'ResourceDescriptor':
        """Build a descriptor from a `{'length': ..., 'type': ...}` mapping."""
        if config.get('length') is None:
            raise ConfigurationError('seekable content requires the `length` option')
        return cls(length=config['length'], content_type=config.get('type') or None)
