"""
HL7 v2.x message codec

Decodes and encodes pipe-delimited HL7 v2.x messages: a generic
segment/field model with registry-driven field aliases, parent/child
segment nesting, automatic set_id numbering and optional MLLP framing.
"""

from .catalog import DEFAULT_REGISTRY
from .exceptions import (
    HL7Error,
    InvalidAppendError,
    InvalidDataError,
    ParseError,
    RangeError,
)
from .layout import Layout
from .message import Message, parse_hl7_message
from .mllp import strip_mllp, wrap_mllp
from .registry import GENERIC_LAYOUT, SegmentRegistry
from .segment import Segment
from .tokenizer import Delimiters

__version__ = "1.0.0"
__author__ = "Healthcare Integration Team"

__all__ = [
    "DEFAULT_REGISTRY",
    "GENERIC_LAYOUT",
    "Delimiters",
    "HL7Error",
    "InvalidAppendError",
    "InvalidDataError",
    "Layout",
    "Message",
    "ParseError",
    "RangeError",
    "Segment",
    "SegmentRegistry",
    "parse_hl7_message",
    "strip_mllp",
    "wrap_mllp",
]
