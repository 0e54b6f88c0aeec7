"""
Guess what a length-prefixed payload holds.

The wire format uses the same encoding for nested messages, strings and
bytes, so every payload is tried against an ordered list of strategies,
most strict first, and the first one that accepts it wins:

  1. a nested message that consumes the payload exactly
  2. valid UTF-8 text
  3. raw bytes, which accepts anything

Each strategy takes the payload view and returns a node, or None when
the payload doesn't fit. classify() therefore never fails.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from protopeek import config
from protopeek.errors import DecodeError
from protopeek.message import Message, decode
from protopeek.protoreader import WireType


@dataclass(frozen=True)
class SubMessage:
    message: Message


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class RawBytes:
    data: memoryview

    def hex_list(self) -> str:
        return "[" + ", ".join(f"{b:02x}" for b in self.data) + "]"


DecodedNode = Union[SubMessage, Text, RawBytes]


def as_submessage(payload) -> Optional[SubMessage]:
    try:
        return SubMessage(decode(payload))
    except DecodeError:
        return None


def as_text(payload) -> Optional[Text]:
    try:
        return Text(str(payload, "utf-8"))
    except UnicodeDecodeError:
        return None


def as_raw_bytes(payload) -> RawBytes:
    return RawBytes(payload)


STRATEGIES = (as_submessage, as_text, as_raw_bytes)
# used once the nesting bound is reached
LEAF_STRATEGIES = (as_text, as_raw_bytes)


def classify(payload, strategies=STRATEGIES) -> DecodedNode:
    for strategy in strategies:
        node = strategy(payload)
        if node is not None:
            return node
    return as_raw_bytes(payload)


@dataclass(frozen=True)
class ResolvedField:
    """
    A field with its length-prefixed value classified.

    value is the integer for numeric wire types, a DecodedNode for
    length-prefixed ones, and None for a nested group. children holds the
    resolved fields of a SubMessage or of a group.
    """
    field_number: int
    wire_type: WireType
    value: Union[int, DecodedNode, None]
    children: Tuple["ResolvedField", ...] = ()

    @property
    def is_nested(self) -> bool:
        return self.wire_type == WireType.START_GROUP or isinstance(self.value, SubMessage)


def _close_group(field_number, parent, children):
    parent.append(ResolvedField(field_number, WireType.START_GROUP, None, tuple(children)))
    return parent


def resolve(message: Message, groups=None, max_depth=None, depth=0) -> Tuple[ResolvedField, ...]:
    """
    Classify every length-prefixed value in message, recursing into
    submessages.

    With groups="skip" start/end group markers are dropped. With
    groups="nest" the fields between a start marker and its matching end
    marker become the children of one group node; unmatched end markers
    are ignored and groups still open at the end of the message are closed.

    Open groups and submessages both count toward max_depth. Past it,
    payloads are not tried as messages and further group markers are
    dropped, so their fields stay at the current level.
    """
    groups = config.check_group_mode(groups or config.GROUP_MODE)
    if max_depth is None:
        max_depth = config.MAX_DEPTH

    root = []
    current = root
    open_groups = []
    # field numbers of start markers dropped at the nesting bound
    flattened = []

    for field in message:
        wire_type = field.wire_type
        level = depth + len(open_groups)

        if wire_type == WireType.LENGTH_PREFIXED:
            if level < max_depth:
                node = classify(field.value)
            else:
                logging.debug(f"Nesting bound {max_depth} reached, field {field.field_number} not tried as a message")
                node = classify(field.value, LEAF_STRATEGIES)

            children = ()
            if isinstance(node, SubMessage):
                children = resolve(node.message, groups, max_depth, level + 1)
            current.append(ResolvedField(field.field_number, wire_type, node, children))

        elif wire_type == WireType.START_GROUP:
            if groups != "nest":
                continue
            if level < max_depth:
                open_groups.append((field.field_number, current))
                current = []
            else:
                logging.debug(f"Nesting bound {max_depth} reached, group {field.field_number} not nested")
                flattened.append(field.field_number)

        elif wire_type == WireType.END_GROUP:
            if groups != "nest":
                continue
            if flattened and flattened[-1] == field.field_number:
                flattened.pop()
            elif open_groups and open_groups[-1][0] == field.field_number:
                field_number, parent = open_groups.pop()
                current = _close_group(field_number, parent, current)
            else:
                logging.debug(f"Ignoring unmatched end group for field {field.field_number}")

        else:
            current.append(ResolvedField(field.field_number, wire_type, field.value))

    while open_groups:
        field_number, parent = open_groups.pop()
        current = _close_group(field_number, parent, current)

    return tuple(root)
