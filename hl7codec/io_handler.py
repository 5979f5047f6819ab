"""
File I/O operations for HL7 message processing.

Handles reading HL7 files from disk with encoding fallback, splitting
files that hold several messages, and writing messages back out in wire
or MLLP form.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from .exceptions import FileReadError
from .message import Message
from .mllp import is_mllp_framed, split_mllp_stream
from .registry import SegmentRegistry
from .tokenizer import Delimiters, split_hl7_messages

logger = logging.getLogger(__name__)

# Common encodings used in HL7 files
ENCODINGS_TO_TRY = ["utf-8", "latin-1", "cp1252", "ascii"]


def _check_path(filepath: Path) -> None:
    if not filepath.exists():
        raise FileReadError(str(filepath), "file does not exist")

    if not filepath.is_file():
        raise FileReadError(str(filepath), "path is not a file")


# Read HL7 File
def read_hl7_file(filepath: Union[str, Path]) -> str:
    """
    Read an HL7 file from disk.

    Attempts multiple encodings to handle various file sources. Line
    endings are returned untouched, so carriage returns survive.

    Args:
        filepath: Path to the HL7 file

    Returns:
        File content as string

    Raises:
        FileReadError: If file cannot be read
    """
    filepath = Path(filepath)
    _check_path(filepath)

    last_error = None
    for encoding in ENCODINGS_TO_TRY:
        try:
            with open(filepath, "r", encoding=encoding, newline="") as f:
                content = f.read()
            logger.debug("Read %s as %s", filepath, encoding)
            return content
        except UnicodeDecodeError as e:
            last_error = e
            continue
        except OSError as e:
            raise FileReadError(str(filepath), str(e))

    raise FileReadError(
        str(filepath),
        f"could not decode file with any supported encoding: {last_error}",
    )


def split_file_content(content: str, delimiters: Delimiters = None) -> List[str]:
    """
    Split file content into message texts.

    MLLP framed content is split on its frames; anything else is split on
    lines starting with MSH.
    """
    if is_mllp_framed(content):
        return split_mllp_stream(content)
    return split_hl7_messages(content, delimiters)


# Parse HL7 File
def parse_hl7_file(
    filepath: Union[str, Path],
    delimiters: Delimiters = None,
    registry: SegmentRegistry = None,
) -> List[Message]:
    """
    Read and parse every message in an HL7 file.

    Args:
        filepath: Path to the HL7 file
        delimiters: Delimiter set to use instead of the defaults
        registry: Segment registry to use instead of DEFAULT_REGISTRY

    Returns:
        One Message per message found in the file
    """
    delimiters = delimiters or Delimiters()
    content = read_hl7_file(filepath)

    messages = [
        Message(text, delimiters=delimiters, registry=registry)
        for text in split_file_content(content, delimiters)
    ]
    logger.debug("Parsed %d messages from %s", len(messages), filepath)
    return messages


# Stream Parse HL7 File
def stream_hl7_file(
    filepath: Union[str, Path],
    delimiters: Delimiters = None,
    registry: SegmentRegistry = None,
    encoding: str = "utf-8",
) -> Iterator[Message]:
    """
    Stream parse an HL7 file, yielding messages one at a time.

    Useful for large files with many messages where loading every
    message into memory at once is not desirable. A new message starts
    at each line beginning with MSH.

    Args:
        filepath: Path to the HL7 file
        delimiters: Delimiter set to use instead of the defaults
        registry: Segment registry to use instead of DEFAULT_REGISTRY
        encoding: Text encoding of the file

    Yields:
        Message for each message in the file
    """
    filepath = Path(filepath)
    _check_path(filepath)
    delimiters = delimiters or Delimiters()

    def build(lines: List[str]) -> Message:
        return Message(
            delimiters.segment.join(lines), delimiters=delimiters, registry=registry
        )

    try:
        with open(filepath, "r", encoding=encoding, newline="") as file_handle:
            current_message_lines = []

            for line in file_handle:
                stripped = line.rstrip("\r\n")
                if not stripped.strip():
                    continue

                if stripped.startswith("MSH"):
                    if current_message_lines:
                        yield build(current_message_lines)
                    current_message_lines = [stripped]
                elif current_message_lines:
                    current_message_lines.append(stripped)

            if current_message_lines:
                yield build(current_message_lines)

    except UnicodeDecodeError as e:
        raise FileReadError(str(filepath), f"could not decode file as {encoding}: {e}")


# Write HL7 File
def write_hl7_file(
    messages: Union[Message, Iterable[Message]],
    filepath: Union[str, Path],
    mllp: bool = False,
    encoding: str = "utf-8",
) -> None:
    """
    Write messages to a file.

    Args:
        messages: A Message or an iterable of Messages
        filepath: Output file path
        mllp: If True, write each message in its MLLP envelope; otherwise
            write wire form with each message terminated by its segment
            delimiter
        encoding: Text encoding of the output file
    """
    if isinstance(messages, Message):
        messages = [messages]

    with open(filepath, "w", encoding=encoding, newline="") as f:
        for message in messages:
            if mllp:
                f.write(message.to_mllp())
            else:
                f.write(message.to_hl7())
                f.write(message.delimiters.segment)
