import asyncio
import os
from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Iterator, Optional, Union

from .constants import CHUNK_SIZE
from .errors import ConfigurationError, SourceError


class ByteSource:
    """
    A resource of known length able to produce any inclusive window of its bytes.

    Windows are lazy and finite; closing the iterator stops further reads.
    """

    length: int
    restartable: bool = True

    def iter_window(self, start: int, end: int) -> Iterator[bytes]:
        raise NotImplementedError

    async def aiter_window(self, start: int, end: int) -> AsyncIterator[bytes]:
        loop = asyncio.get_running_loop()
        chunks = self.iter_window(start, end)
        pending = None
        try:
            while True:
                pending = loop.run_in_executor(None, next, chunks, None)
                chunk = await asyncio.shield(pending)
                if chunk is None:
                    break
                yield chunk
        finally:
            # an interrupted read keeps running on the executor; the window can only be closed once it returns
            if pending is not None and not pending.done():
                await asyncio.wait((pending,))
                if not pending.cancelled():
                    pending.exception()
            chunks.close()

    def __iter__(self) -> Iterator[bytes]:
        if not self.length:
            return iter(())
        return self.iter_window(0, self.length - 1)


class BufferSource(ByteSource):
    def __init__(self, data: Union[bytes, bytearray, memoryview], chunk_size: int = CHUNK_SIZE):
        self.data = memoryview(data).cast('B')
        self.length = len(self.data)
        self.chunk_size = chunk_size

    def slice(self, start: int, end: int) -> bytes:
        return bytes(self.data[start : end + 1])

    def iter_window(self, start: int, end: int) -> Iterator[bytes]:
        for offset in range(start, end + 1, self.chunk_size):
            yield bytes(self.data[offset : min(offset + self.chunk_size, end + 1)])

    async def aiter_window(self, start: int, end: int) -> AsyncIterator[bytes]:
        for chunk in self.iter_window(start, end):
            yield chunk


class FileSource(ByteSource):
    def __init__(self, path: Union[str, os.PathLike], chunk_size: int = CHUNK_SIZE):
        self.path = Path(path)
        if not self.path.is_file():
            raise ConfigurationError(f'{self.path} is not a regular file')
        self.length = self.path.stat().st_size
        self.chunk_size = chunk_size

    def iter_window(self, start: int, end: int) -> Iterator[bytes]:
        remaining = end - start + 1
        with self.path.open('rb') as f:
            f.seek(start)
            while remaining > 0:
                chunk = f.read(min(self.chunk_size, remaining))
                if not chunk:
                    raise SourceError(f'{self.path} shrank while being served')
                remaining -= len(chunk)
                yield chunk


class StreamSource(ByteSource):
    """
    A one-shot source over a binary readable object or an iterable of byte chunks.

    The declared length is trusted; a stream ending before the requested
    window is complete raises `SourceError`.
    """

    restartable = False

    def __init__(self, stream: Any, length: int, chunk_size: int = CHUNK_SIZE):
        self.stream = stream
        self.length = length
        self.chunk_size = chunk_size
        self._consumed = False

    def _seekable(self) -> bool:
        seekable = getattr(self.stream, 'seekable', None)
        return hasattr(self.stream, 'read') and callable(seekable) and seekable()

    def _chunks(self) -> Iterator[bytes]:
        if not hasattr(self.stream, 'read'):
            yield from self.stream
            return
        while True:
            chunk = self.stream.read(self.chunk_size)
            if not chunk:
                return
            yield chunk

    def iter_window(self, start: int, end: int) -> Iterator[bytes]:
        if self._consumed:
            raise SourceError('stream sources can only be read once')
        self._consumed = True
        return self._window(start, end)

    def _window(self, start: int, end: int) -> Iterator[bytes]:
        skip = start
        remaining = end - start + 1
        if skip and self._seekable():
            self.stream.seek(skip, os.SEEK_CUR)
            skip = 0
        chunks = self._chunks()
        try:
            for chunk in chunks:
                if skip:
                    if len(chunk) <= skip:
                        skip -= len(chunk)
                        continue
                    chunk = chunk[skip:]
                    skip = 0
                if len(chunk) >= remaining:
                    yield bytes(chunk[:remaining])
                    return
                remaining -= len(chunk)
                yield bytes(chunk)
        finally:
            chunks.close()
        raise SourceError(f'stream ended {remaining} bytes before the requested window')


def as_source(content: Any, length: Optional[int] = None, chunk_size: int = CHUNK_SIZE) -> ByteSource:
    if isinstance(content, ByteSource):
        return content
    if isinstance(content, (bytes, bytearray, memoryview)):
        return BufferSource(content, chunk_size=chunk_size)
    if isinstance(content, (str, os.PathLike)):
        return FileSource(content, chunk_size=chunk_size)
    if hasattr(content, 'read') or isinstance(content, Iterable):
        if length is None:
            raise ConfigurationError('streamed content requires the `length` option')
        return StreamSource(content, length, chunk_size=chunk_size)
    raise ConfigurationError(f'unsupported content type {type(content).__name__}')
