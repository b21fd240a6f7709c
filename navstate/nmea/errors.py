"""Rejection reasons for lines that cannot be turned into a sentence record.

Every error here is local to a single line: the ingest pipeline counts it and
moves on to the next line. The ``kind`` class attribute is the stable key used
in health counters.
"""

__all__ = [
    "ChecksumMismatch",
    "FieldDecodeError",
    "FrameTooLong",
    "IngestError",
    "MalformedFrame",
    "UnrecognizedSentenceKind",
    "UnsupportedEncoding",
]


class IngestError(Exception):
    """Base class for per-line ingest failures."""

    kind = "IngestError"


class FrameTooLong(IngestError):
    """A candidate line exceeded the maximum frame length and was dropped."""

    kind = "FrameTooLong"

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"frame of {length} bytes exceeds limit of {limit}")
        self.length = length
        self.limit = limit


class MalformedFrame(IngestError):
    """Missing '$'/'!' prefix, wrong number of '*' or a truncated checksum."""

    kind = "MalformedFrame"


class ChecksumMismatch(IngestError):
    """The transmitted checksum does not match the computed one."""

    kind = "ChecksumMismatch"

    def __init__(self, expected: str, computed: int) -> None:
        super().__init__(f"checksum {expected!r} does not match computed {computed:02X}")
        self.expected = expected
        self.computed = computed


class FieldDecodeError(IngestError):
    """A non-empty field could not be decoded, or a required field is missing."""

    kind = "FieldDecodeError"

    def __init__(self, field_index: int, value: str | None = None) -> None:
        if value is None:
            message = f"field {field_index} is missing"
        else:
            message = f"field {field_index} has invalid value {value!r}"
        super().__init__(message)
        self.field_index = field_index
        self.value = value


class UnsupportedEncoding(IngestError):
    """The line contains bytes outside the ASCII range."""

    kind = "UnsupportedEncoding"


class UnrecognizedSentenceKind(IngestError):
    """Informational: a well-formed sentence of a kind with no decoder.

    Never raised by the parser; the pipeline records it for every
    ``UnrecognizedSentence`` it sees so the counter shows up in health reports.
    """

    kind = "UnrecognizedSentenceKind"

    def __init__(self, tag: str) -> None:
        super().__init__(f"unrecognized sentence {tag!r}")
        self.tag = tag
