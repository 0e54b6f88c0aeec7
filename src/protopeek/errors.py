"""Exceptions raised while decoding wire-format buffers."""


class DecodeError(ValueError):
    """Base class for every failure of a schema-less decode."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (offset {offset})")
        self.offset = offset


class UnexpectedEnd(DecodeError):
    def __init__(self, offset: int, needed: int = 1):
        super().__init__(f"Out of bytes: need {needed} more", offset)
        self.needed = needed


class InvalidWireType(DecodeError):
    def __init__(self, wire_type: int, offset: int):
        super().__init__(f"Invalid wire type {wire_type}", offset)
        self.wire_type = wire_type


class TrailingBytes(DecodeError):
    """The field stream stopped before the end of the buffer."""

    def __init__(self, offset: int, remaining: int):
        super().__init__(f"{remaining} trailing byte(s) could not be parsed", offset)
        self.remaining = remaining
