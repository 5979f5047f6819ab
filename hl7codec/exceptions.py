"""
Custom exceptions for HL7 message handling.

Every failure is raised at the point it is detected; the library never
skips a malformed segment or retries internally.
"""


# Base Exception
class HL7Error(Exception):
    """Base exception for all HL7 errors."""

    def __init__(
        self,
        message: str = "",
        segment: str = None,
        field_index: int = None,
        line_number: int = None,
    ):
        self.segment = segment
        self.field_index = field_index
        self.line_number = line_number

        details = []
        if segment:
            details.append(f"segment={segment}")
        if field_index is not None:
            details.append(f"field={field_index}")
        if line_number is not None:
            details.append(f"line={line_number}")

        full_message = message
        if details:
            full_message = f"{message} [{', '.join(details)}]"

        super().__init__(full_message)


# Parse Error
class ParseError(HL7Error):
    """Raised when input cannot be turned into a message."""


# Invalid Append Error
class InvalidAppendError(HL7Error, TypeError):
    """Raised when something other than a Segment is added to a segment list."""

    def __init__(self, value, target: str = "message"):
        self.value = value
        super().__init__(
            f"attempting to add {type(value).__name__} to a {target}; "
            "only Segment values are accepted"
        )


# Range Error
class RangeError(HL7Error):
    """Raised for an invalid field index."""

    def __init__(self, index: int, segment: str = None):
        self.index = index
        super().__init__(
            f"invalid field index {index}", segment=segment, field_index=index
        )


# Invalid Data Error
class InvalidDataError(HL7Error):
    """Raised when a field validator rejects a value."""

    def __init__(self, alias: str, value, segment: str = None, field_index: int = None):
        self.alias = alias
        self.value = value
        super().__init__(
            f"invalid value {value!r} for field '{alias}'",
            segment=segment,
            field_index=field_index,
        )


# Unknown Field Error
class UnknownFieldError(HL7Error, KeyError):
    """Raised when a field alias is not declared by the segment layout."""

    def __init__(self, alias: str, segment: str = None):
        self.alias = alias
        super().__init__(f"unknown field alias '{alias}'", segment=segment)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return Exception.__str__(self)


# Invalid Delimiter Error
class InvalidDelimiterError(HL7Error, ValueError):
    """Raised when a delimiter set is unusable."""


# Layout Frozen Error
class LayoutFrozenError(HL7Error):
    """Raised when a registered layout is modified."""

    def __init__(self, layout_name: str):
        self.layout_name = layout_name
        super().__init__(
            f"layout '{layout_name}' is registered and can no longer be changed",
            segment=layout_name,
        )


# File Read Error
class FileReadError(HL7Error):
    """Raised when the input file cannot be read."""

    def __init__(self, filepath: str, reason: str):
        self.filepath = filepath
        self.reason = reason
        super().__init__(f"Cannot read file '{filepath}': {reason}")
