from enum import IntEnum
from typing import NamedTuple, Tuple

from protopeek.errors import InvalidWireType, UnexpectedEnd

# varints longer than 64 bits wrap instead of failing
VARINT_MASK = (1 << 64) - 1


class WireType(IntEnum):
    VARINT = 0
    INT64 = 1
    LENGTH_PREFIXED = 2
    START_GROUP = 3
    END_GROUP = 4
    INT32 = 5


class FieldTag(NamedTuple):
    wire_type: WireType
    field_number: int


class ProtoReader:
    """
    Cursor over a protobuf wire-format buffer.
    Supports:
      - varint (wire type 0)
      - 64-bit (wire type 1)
      - length-delimited (wire type 2)
      - group markers (wire types 3 and 4, no payload)
      - 32-bit (wire type 5)

    Length-delimited payloads come back as memoryview slices of the
    original buffer, nothing is copied.
    """

    def __init__(self, data, pos: int = 0):
        self.data = memoryview(data).cast("B")
        self.pos = pos
        # why the last decode_message stopped early, if it did
        self.error = None

    def eof(self):
        return self.pos >= len(self.data)

    def remaining(self):
        return len(self.data) - self.pos

    def _take(self, n: int) -> memoryview:
        if n > self.remaining():
            raise UnexpectedEnd(self.pos, n - self.remaining())
        out = self.data[self.pos:self.pos + n]
        self.pos += n
        return out

    def read_varint(self) -> int:
        """Standard protobuf varint, first byte is least significant."""
        result = 0
        shift = 0
        while True:
            if self.pos >= len(self.data):
                raise UnexpectedEnd(self.pos)
            b = self.data[self.pos]
            self.pos += 1
            result |= (b & 0x7F) << shift
            if not (b & 0x80):
                break
            shift += 7
        return result & VARINT_MASK

    def read_tag(self) -> FieldTag:
        start = self.pos
        key = self.read_varint()
        try:
            wire_type = WireType(key & 0x07)
        except ValueError:
            raise InvalidWireType(key & 0x07, start) from None
        return FieldTag(wire_type, key >> 3)

    def read_length_prefixed(self) -> memoryview:
        length = self.read_varint()
        return self._take(length)

    def read_fixed32(self) -> int:
        return int.from_bytes(self._take(4), "little", signed=False)

    def read_fixed64(self) -> int:
        return int.from_bytes(self._take(8), "little", signed=False)


def decode_varint(buf, pos: int = 0) -> Tuple[int, int]:
    """Decode a varint from buf starting at pos. Returns (value, new_pos)."""
    reader = ProtoReader(buf, pos)
    return reader.read_varint(), reader.pos


def decode_fixed32(buf, pos: int = 0) -> Tuple[int, int]:
    reader = ProtoReader(buf, pos)
    return reader.read_fixed32(), reader.pos


def decode_fixed64(buf, pos: int = 0) -> Tuple[int, int]:
    reader = ProtoReader(buf, pos)
    return reader.read_fixed64(), reader.pos


def decode_length_prefixed(buf, pos: int = 0) -> Tuple[memoryview, int]:
    reader = ProtoReader(buf, pos)
    return reader.read_length_prefixed(), reader.pos
