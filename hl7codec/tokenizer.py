"""
HL7 delimiter handling and low-level splitting utilities.

This module handles the raw wire format of HL7 v2.x messages: the
delimiter set that parameterizes every split and join, and the helpers
that cut text into segments and fields. Splitting never trims, so a
trailing delimiter always produces a trailing empty piece.
"""

from dataclasses import dataclass
from typing import List

from .exceptions import InvalidDelimiterError

# Default HL7 delimiters
DEFAULT_FIELD_SEPARATOR = "|"
DEFAULT_ITEM_SEPARATOR = "^"
DEFAULT_SEGMENT_SEPARATOR = "\r"


# Delimiters Dataclass
@dataclass
class Delimiters:
    """
    The three separators used to split and join a message.

    A Message owns one instance and hands the same object to every
    Segment it holds, so changing a delimiter on the message is seen by
    all of its segments.
    """

    field: str = DEFAULT_FIELD_SEPARATOR
    item: str = DEFAULT_ITEM_SEPARATOR
    segment: str = DEFAULT_SEGMENT_SEPARATOR

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check that every delimiter is a single character and that no
        character is used for two purposes.

        Raises:
            InvalidDelimiterError: If the delimiter set is unusable
        """
        delimiters = [
            ("field", self.field),
            ("item", self.item),
            ("segment", self.segment),
        ]

        for name, char in delimiters:
            if not isinstance(char, str) or len(char) != 1:
                raise InvalidDelimiterError(
                    f"Invalid {name} delimiter {char!r}: must be a single character"
                )

        chars_used = set()
        for name, char in delimiters:
            if char in chars_used:
                raise InvalidDelimiterError(
                    f"Conflicting delimiter: {char!r} used for multiple purposes"
                )
            chars_used.add(char)


def split_segments(text: str, delimiters: Delimiters) -> List[str]:
    """Split message text into raw segment strings, keeping empty pieces."""
    return text.split(delimiters.segment)


def split_fields(segment_text: str, delimiters: Delimiters) -> List[str]:
    """Split one raw segment into its fields, keeping empty trailing fields."""
    return segment_text.split(delimiters.field)


# HL7 Message Splitter
def split_hl7_messages(content: str, delimiters: Delimiters = None) -> List[str]:
    """
    Split file content containing multiple HL7 messages.

    Messages are separated by MSH segments. Any of the common line
    endings may terminate a segment; the returned messages use the
    segment delimiter of ``delimiters``.

    Args:
        content: File content potentially containing multiple messages
        delimiters: Delimiter set used to join the segments of each message

    Returns:
        List of individual message strings
    """
    delimiters = delimiters or Delimiters()

    # Normalize line endings first
    normalized = content.replace("\r\n", "\n").replace("\r", "\n")

    messages = []
    current_message_lines = []

    for line in normalized.split("\n"):
        if not line.strip():
            continue

        # New message starts with MSH
        if line.startswith("MSH"):
            if current_message_lines:
                messages.append(delimiters.segment.join(current_message_lines))
            current_message_lines = [line]
        elif current_message_lines:
            current_message_lines.append(line)

    if current_message_lines:
        messages.append(delimiters.segment.join(current_message_lines))

    return messages
