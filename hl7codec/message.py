"""
HL7 message model.

A Message is an ordered collection of Segments with a secondary lookup
by segment name. It parses raw text (optionally MLLP framed), gives
access to segments by position or by name, keeps ``set_id`` fields of
repeated segments numbered, and serializes back to wire form.

Usage:
    message = Message(raw_text)
    message["PID"].patient_name
    message.append(DEFAULT_REGISTRY.create("NTE"))
    wire = message.to_mllp()
"""

import logging
import re
from collections.abc import Iterable
from typing import Dict, List, Union

from .catalog import DEFAULT_REGISTRY
from .exceptions import HL7Error, InvalidAppendError, ParseError
from .mllp import is_mllp_framed, strip_mllp, wrap_mllp
from .registry import SegmentRegistry
from .segment import Segment
from .tokenizer import Delimiters, split_fields, split_segments

logger = logging.getLogger(__name__)

SET_ID = "set_id"
DEFAULT_ENCODING = "utf-8"

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def _as_int(value) -> int:
    """Leading integer of ``value``; 0 when there is none."""
    match = _LEADING_INTEGER.match(str(value))
    return int(match.group(1)) if match else 0


def _strip_line_ending(line: str, segment_delimiter: str) -> str:
    """Drop one line terminator or trailing segment delimiter from a line."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    if line.endswith(segment_delimiter) and not is_mllp_framed(line):
        return line[:-len(segment_delimiter)]
    return line


# HL7 Message Class
class Message:
    """
    Registry-driven representation of an HL7 v2.x message.

    Args:
        raw: Optional message to parse: a string, bytes, or an iterable
            of lines (e.g. from ``file.readlines()``)
        delimiters: Delimiter set shared with every segment of the message
        registry: Segment registry used to resolve segment names
        encoding: Encoding used when ``raw`` is bytes
    """

    def __init__(
        self,
        raw=None,
        delimiters: Delimiters = None,
        registry: SegmentRegistry = None,
        encoding: str = DEFAULT_ENCODING,
    ):
        self.delimiters = delimiters or Delimiters()
        self.registry = registry or DEFAULT_REGISTRY
        self.encoding = encoding
        self.segments: List[Segment] = []
        self.segments_by_name: Dict[str, List[Segment]] = {}

        if raw is not None:
            self.parse(raw)

    # Parsing
    def parse(self, raw) -> "Message":
        """
        Parse a string, bytes or iterable of lines into this message.

        Either every segment is added or, on error, none is.

        Raises:
            ParseError: If the input has the wrong type or holds no segments
        """
        if isinstance(raw, (bytes, bytearray)):
            chunks = [self._decode(raw)]
        elif isinstance(raw, str):
            chunks = [raw]
        elif isinstance(raw, Iterable):
            chunks = []
            for line in raw:
                if isinstance(line, (bytes, bytearray)):
                    line = self._decode(line)
                line = _strip_line_ending(str(line), self.delimiters.segment)
                if line:
                    chunks.append(line)
        else:
            raise ParseError(
                f"cannot parse {type(raw).__name__}; expected a string or "
                "an iterable of strings"
            )

        segments = []
        for chunk in chunks:
            segments.extend(self._generate_segments(chunk))

        if not segments:
            raise ParseError("message contains no segments")

        for segment in segments:
            self._add(segment)
        self.sequence_segments()

        logger.debug(
            "Parsed %d segments (%s)",
            len(segments),
            ", ".join(segment.name for segment in segments),
        )
        return self

    def _decode(self, data) -> str:
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise ParseError(f"cannot decode input as {self.encoding}: {e}") from e

    def _generate_segments(self, text: str) -> List[Segment]:
        payload = strip_mllp(text)
        if not payload:
            return []

        segments = []
        for piece in split_segments(payload, self.delimiters):
            fields = split_fields(piece, self.delimiters)
            layout = self.registry.resolve(fields[0])
            segments.append(Segment(fields, layout=layout, delimiters=self.delimiters))

        return segments

    # Segment Access
    def __getitem__(self, index):
        """
        Segment(s) by position, slice or name.

        A name matching exactly one segment returns that segment; any
        other count returns the list of matches (possibly empty).
        """
        if isinstance(index, (int, slice)):
            return self.segments[index]
        if isinstance(index, str):
            found = self.segments_by_name.get(index, [])
            if len(found) == 1:
                return found[0]
            return list(found)
        raise TypeError(
            f"segment index must be an int, slice or name, not {type(index).__name__}"
        )

    def __setitem__(self, index, value) -> None:
        """
        Replace a segment by position, or add one under a name.

        Assigning to a name adds the segment to that name's bucket (and to
        the message) instead of replacing the bucket. The name must be the
        segment's own name.

        Raises:
            InvalidAppendError: If ``value`` is not a Segment
            HL7Error: If a named assignment does not match the segment name
        """
        if isinstance(index, slice):
            value = [self._adopt(segment) for segment in value]
            self.segments[index] = value
            self._reindex()
        elif isinstance(index, int):
            self.segments[index] = self._adopt(value)
            self._reindex()
        else:
            if isinstance(value, Segment) and value.name != str(index):
                raise HL7Error(
                    f"cannot file a {value.name} segment under '{index}'",
                    segment=value.name,
                )
            self.append(value)

    def segments_named(self, name: str) -> List[Segment]:
        """All segments called ``name``, always as a list."""
        return list(self.segments_by_name.get(name, []))

    def __contains__(self, name: str) -> bool:
        return bool(self.segments_by_name.get(name))

    def __iter__(self):
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return self.segments == other.segments

    __hash__ = None

    # Mutation
    def append(self, segment: Segment) -> "Message":
        """
        Add a segment to the end of the message and renumber set ids.

        Raises:
            InvalidAppendError: If ``segment`` is not a Segment
        """
        self._add(self._adopt(segment))
        self.sequence_segments()
        return self

    def __lshift__(self, segment: Segment) -> "Message":
        return self.append(segment)

    def _adopt(self, segment) -> Segment:
        if not isinstance(segment, Segment):
            raise InvalidAppendError(segment)
        segment.delimiters = self.delimiters
        return segment

    def _add(self, segment: Segment) -> None:
        self.segments.append(segment)
        self.segments_by_name.setdefault(segment.name, []).append(segment)

    def _reindex(self) -> None:
        self.segments_by_name = {}
        for segment in self.segments:
            self.segments_by_name.setdefault(segment.name, []).append(segment)

    def sequence_segments(self, base: Segment = None) -> None:
        """
        Number the ``set_id`` field of consecutive segments of one type.

        Only directly adjacent segments sharing a layout that declares
        ``set_id`` are numbered, so a run interrupted by another segment
        type starts again. Child lists are numbered independently.
        """
        segments = self.segments if base is None else base.children

        previous = None
        for segment in segments:
            if (
                previous is not None
                and segment.layout is previous.layout
                and segment.layout.has_field(SET_ID)
            ):
                if previous.read(SET_ID) in (None, ""):
                    previous.write(SET_ID, 1)
                segment.write(SET_ID, _as_int(previous.read(SET_ID)) + 1)

            if segment.has_children:
                self.sequence_segments(segment)

            previous = segment

    def sorted_segments(self) -> List[Segment]:
        """Segments ordered by declared weight, lowest first."""
        return sorted(self.segments, key=lambda segment: segment.weight)

    # Serialization
    def to_hl7(self) -> str:
        """HL7 wire form of the message."""
        return self.delimiters.segment.join(
            segment.to_hl7() for segment in self.segments
        )

    def __str__(self) -> str:
        # readable only; not meant to be parsed back
        return "\n".join(segment.to_hl7() for segment in self.segments)

    def to_mllp(self) -> str:
        """Wire form wrapped in an MLLP envelope."""
        return wrap_mllp(self.to_hl7())

    def to_mllp_bytes(self, encoding: str = None) -> bytes:
        return self.to_mllp().encode(encoding or self.encoding)

    def __repr__(self) -> str:
        return f"<Message segments={len(self.segments)}>"


# Convenience function to parse HL7 messages
def parse_hl7_message(
    content: Union[str, bytes, Iterable],
    delimiters: Delimiters = None,
    registry: SegmentRegistry = None,
) -> Message:
    """
    Parse one HL7 message.

    Args:
        content: Raw message text, bytes or lines
        delimiters: Delimiter set to use instead of the defaults
        registry: Segment registry to use instead of DEFAULT_REGISTRY

    Returns:
        The parsed Message
    """
    return Message(content, delimiters=delimiters, registry=registry)
