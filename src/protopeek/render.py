"""Text and JSON rendering of resolved messages."""

from typing import Any, Dict, List

from protopeek.message import Message
from protopeek.protoreader import WireType
from protopeek.resolver import RawBytes, ResolvedField, Text, resolve

INDENT = "  "

WIRE_TYPE_NAMES = {
    WireType.VARINT: 'varint',
    WireType.INT64: 'fixed64',
    WireType.LENGTH_PREFIXED: 'length_delimited',
    WireType.START_GROUP: 'group',
    WireType.END_GROUP: 'end_group',
    WireType.INT32: 'fixed32',
}


def format_value(value) -> str:
    if isinstance(value, Text):
        return value.text
    if isinstance(value, RawBytes):
        return value.hex_list()
    return str(value)


def _render_lines(fields, indent: int, lines: List[str]):
    pad = INDENT * indent
    for field in fields:
        if field.is_nested:
            lines.append(f"{pad}{field.field_number}: {{")
            _render_lines(field.children, indent + 1, lines)
            lines.append(f"{pad}}}")
        else:
            lines.append(f"{pad}{field.field_number}: {format_value(field.value)}")


def lines_from_resolved(fields) -> List[str]:
    lines = []
    _render_lines(fields, 0, lines)
    return lines


def render(message: Message, groups=None, max_depth=None) -> List[str]:
    """Render a decoded message as indented text lines, two spaces per level."""
    return lines_from_resolved(resolve(message, groups, max_depth))


def _tree_node(field: ResolvedField) -> Dict[str, Any]:
    value = field.value
    if field.is_nested:
        kind = "group" if field.wire_type == WireType.START_GROUP else "message"
        value = [_tree_node(child) for child in field.children]
    elif isinstance(value, Text):
        kind, value = "text", value.text
    elif isinstance(value, RawBytes):
        kind, value = "bytes", value.data.hex()
    else:
        kind = WIRE_TYPE_NAMES[field.wire_type]

    return {
        "field": field.field_number,
        "wire_type": WIRE_TYPE_NAMES[field.wire_type],
        "kind": kind,
        "value": value,
    }


def tree_from_resolved(fields) -> List[Dict[str, Any]]:
    return [_tree_node(field) for field in fields]


def render_tree(message: Message, groups=None, max_depth=None) -> List[Dict[str, Any]]:
    """JSON-ready form of the resolved message, used by --json and the HTTP service."""
    return tree_from_resolved(resolve(message, groups, max_depth))
