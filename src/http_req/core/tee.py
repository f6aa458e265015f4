"""Request body reader that copies everything it hands out."""

import io
from typing import BinaryIO, Iterator, Optional

CHUNK_SIZE = 16 * 1024


class TeeReader:
    """
    File-like body that duplicates every byte read into a capture buffer.

    The transport reads the body; whatever it reads is appended to the
    capture unchanged, so the capture holds the wire payload once the request
    is sent and stays empty before that.

    requests sees a sized stream: __len__ gives Content-Length and tell()
    records the start position, so a 307/308 redirect can seek() back and
    resend the body. Seeking cuts the capture back to the new position,
    keeping it equal to the bytes of the last send.

    Example:
        >>> body = TeeReader(io.BytesIO(b"a=1"), length=3)
        >>> body.read()
        b'a=1'
        >>> body.captured
        b'a=1'
    """

    def __init__(
        self,
        source: BinaryIO,
        capture: Optional[bytearray] = None,
        length: Optional[int] = None,
    ):
        self._source = source
        self._capture = capture if capture is not None else bytearray()
        self._length = length
        self._start = source.tell()

    def read(self, size: int = -1) -> bytes:
        if size is None:
            size = -1
        chunk = self._source.read(size)
        if chunk:
            self._capture.extend(chunk)
        return chunk

    def __iter__(self) -> Iterator[bytes]:
        return iter(lambda: self.read(CHUNK_SIZE), b"")

    def tell(self) -> int:
        """Position relative to the start of the body."""
        return self._source.tell() - self._start

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            offset += self._start
        self._source.seek(offset, whence)
        position = self.tell()
        del self._capture[position:]
        return position

    def __len__(self) -> int:
        return self._length or 0

    def close(self) -> None:
        self._source.close()

    @property
    def captured(self) -> bytes:
        """Bytes sent so far."""
        return bytes(self._capture)
