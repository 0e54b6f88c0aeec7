"""
Field stream decoding.

A message on the wire is nothing but a run of (tag, value) pairs, so
decoding without a schema gives an ordered list of fields whose
length-prefixed values are still opaque. Working out what those values
are is left to protopeek.resolver.
"""

import logging
from dataclasses import dataclass
from typing import Tuple, Union

from protopeek.errors import DecodeError, TrailingBytes
from protopeek.protoreader import ProtoReader, WireType

FieldValue = Union[int, memoryview, None]


@dataclass(frozen=True)
class Field:
    field_number: int
    wire_type: WireType
    # int for numeric wire types, memoryview for length-prefixed, None for group markers
    value: FieldValue = None


Message = Tuple[Field, ...]


def decode_field(reader: ProtoReader) -> Field:
    """Read one tag and the value its wire type implies."""
    wire_type, field_number = reader.read_tag()

    if wire_type == WireType.VARINT:
        value = reader.read_varint()
    elif wire_type == WireType.INT64:
        value = reader.read_fixed64()
    elif wire_type == WireType.LENGTH_PREFIXED:
        value = reader.read_length_prefixed()
    elif wire_type == WireType.INT32:
        value = reader.read_fixed32()
    else:
        # start/end group markers carry nothing
        value = None

    return Field(field_number, wire_type, value)


def decode_message(reader: ProtoReader) -> Message:
    """
    Collect fields until the reader hits the end of its buffer.

    Stops early at the first field that fails to decode and leaves the
    cursor at the start of that field, with the failure stored on
    reader.error. Callers that need the whole buffer check reader.eof().
    """
    fields = []
    reader.error = None

    while not reader.eof():
        start = reader.pos
        try:
            fields.append(decode_field(reader))
        except DecodeError as e:
            reader.pos = start
            reader.error = e
            break

    return tuple(fields)


def decode(buffer) -> Message:
    """Decode a complete buffer. Every byte must belong to a field."""
    reader = ProtoReader(buffer)
    fields = decode_message(reader)

    if not reader.eof():
        logging.debug(f"Field stream stopped at offset {reader.pos}: {reader.error}")
        raise TrailingBytes(reader.pos, reader.remaining()) from reader.error

    return fields
