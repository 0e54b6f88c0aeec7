"""
protopeek: decode protobuf wire-format data without a .proto schema.

Example:
    from protopeek import decode, render

    for line in render(decode(open("message.bin", "rb").read())):
        print(line)
"""

from protopeek.errors import DecodeError, InvalidWireType, TrailingBytes, UnexpectedEnd
from protopeek.message import Field, Message, decode, decode_field, decode_message
from protopeek.protoreader import FieldTag, ProtoReader, WireType
from protopeek.render import render, render_tree
from protopeek.resolver import RawBytes, SubMessage, Text, classify, resolve

__all__ = [
    "decode",
    "decode_field",
    "decode_message",
    "render",
    "render_tree",
    "classify",
    "resolve",
    "ProtoReader",
    "WireType",
    "FieldTag",
    "Field",
    "Message",
    "SubMessage",
    "Text",
    "RawBytes",
    "DecodeError",
    "UnexpectedEnd",
    "InvalidWireType",
    "TrailingBytes",
]

__version__ = "0.1.0"
