import contextlib
from dataclasses import dataclass
from enum import Enum, auto, unique
from functools import cached_property

from _taffy.scanner.byte_source import ByteSource
from _taffy.scanner.errors import EndOfInput
from _taffy.scanner.token import Token
from _taffy.scanner.token_kind import TokenKind

LINEBREAK = ord("\n")
TAB = ord("\t")
DASH = ord("-")

HEADER_PREFIX = b"-- "
HEADER_SUFFIX = b" --"
MIN_HEADER_LENGTH = len(HEADER_PREFIX) + len(HEADER_SUFFIX)


def header_title(line):
    """
    Classify a line starting with "-" (without its linebreak).

    >>> header_title(b"-- my title --")
    b'my title'
    >>> header_title(b"- not a header -") is None
    True

    :param line: The bytes of the line.
    :returns: The title of the header, or None if the line is content.
    """
    if (
        len(line) < MIN_HEADER_LENGTH
        or not line.startswith(HEADER_PREFIX)
        or not line.endswith(HEADER_SUFFIX)
    ):
        return None
    return bytes(line[len(HEADER_PREFIX) : -len(HEADER_SUFFIX)])


@unique
class ScanState(Enum):
    LINE_START = auto()
    HEADER_CANDIDATE = auto()
    CONTENT_LINE = auto()


@dataclass(frozen=True)
class Ready:
    pass


@dataclass(frozen=True)
class PendingTitle:
    """A header found while finishing the previous body, returned by the next scan."""

    title: bytes


@dataclass(frozen=True)
class PendingFailure:
    """A failure of the byte source, delivered by the next scan."""

    error: Exception


@dataclass(frozen=True)
class Exhausted:
    """The failure has been delivered, every further scan raises it again."""

    error: Exception


class _ReadFailure(Exception):
    def __init__(self, error):
        super().__init__(error)
        self.error = error


class Scanner:
    """
    Incrementally splits a taffy archive into tokens.

    Each call to scan() returns exactly one token, alternating between
    headers and content: the body following a header is always returned as a
    content token, even when it is empty, and two content tokens never
    follow each other. The first token is content only if the archive has a
    leading comment.

    When the byte source fails (EndOfInput at the end of the archive, or any
    error of the underlying stream) the content gathered so far is returned
    first, and the failure is raised by the next call.

    For a stream containing "-- a --\\nx\\n-- b --\\n" the scanner returns
    a header titled "a", the content "x", a header titled "b" and finally
    empty content, in that order.

    Content tokens are views into a buffer owned by the scanner and are
    released at the start of the next scan. A scanner is a single forward
    cursor and must not be shared between threads.
    """

    def __init__(self, stream, chunk_size=1):
        """
        :param stream: A binary stream containing the taffy archive.
        :param chunk_size: Number of bytes read from the stream at a time,
            see ByteSource.
        """
        self.source = ByteSource(stream, chunk_size=chunk_size)
        self._content = bytearray()
        self._candidate = bytearray()
        self._found_header = False
        self._pending = Ready()
        self._borrowed = None

    @cached_property
    def _transitions(self):
        return {
            ScanState.LINE_START: self._line_start,
            ScanState.HEADER_CANDIDATE: self._header_candidate,
            ScanState.CONTENT_LINE: self._content_line,
        }

    def __iter__(self):
        while True:
            try:
                token = self.scan()
            except EndOfInput:
                return
            yield token

    def scan(self):
        """
        :returns: The next token of the archive.
        :raises EndOfInput: When the archive has been fully tokenized.

        Errors of the underlying stream are raised as is, after the content
        preceding them has been returned.
        """
        self._release_borrowed()

        pending = self._pending
        if isinstance(pending, PendingTitle):
            self._pending = Ready()
            return Token(TokenKind.HEADER, pending.title)
        if isinstance(pending, PendingFailure):
            self._pending = Exhausted(pending.error)
            raise pending.error
        if isinstance(pending, Exhausted):
            raise pending.error

        self._reset_content()
        state = ScanState.LINE_START
        try:
            while True:
                result = self._transitions[state]()
                if isinstance(result, Token):
                    return result
                state = result
        except _ReadFailure as failure:
            self._pending = PendingFailure(failure.error)
            return self._lend(len(self._content))

    def _read1(self):
        try:
            return self.source.read1()
        except Exception as err:
            # Every failure of the source ends the scan the same way.
            raise _ReadFailure(err) from err

    def _line_start(self):
        if self._content == b"\n":
            # A body starting with two empty lines keeps both linebreaks
            # of the first one.
            self._content.append(LINEBREAK)

        byte = self._read1()
        if byte == TAB:
            return ScanState.CONTENT_LINE
        if byte == LINEBREAK:
            self._content.append(LINEBREAK)
            return ScanState.LINE_START
        if byte == DASH:
            del self._candidate[:]
            self._candidate.append(DASH)
            return ScanState.HEADER_CANDIDATE
        self._content.append(byte)
        return ScanState.CONTENT_LINE

    def _header_candidate(self):
        while True:
            try:
                byte = self._read1()
            except _ReadFailure:
                # Unterminated line, cannot be a header.
                self._content += self._candidate
                raise
            if byte == LINEBREAK:
                break
            self._candidate.append(byte)

        title = header_title(self._candidate)
        if title is None:
            self._content += self._candidate
            self._content.append(LINEBREAK)
            return ScanState.LINE_START

        if not self._found_header and not self._content:
            self._found_header = True
            return Token(TokenKind.HEADER, title)

        # The header also ends the previous body, which has to be returned
        # first.
        self._found_header = True
        self._pending = PendingTitle(title)
        # The linebreak before the header line belongs to the header.
        return self._lend(max(len(self._content) - 1, 0))

    def _content_line(self):
        while True:
            byte = self._read1()
            self._content.append(byte)
            if byte == LINEBREAK:
                return ScanState.LINE_START

    def _lend(self, end):
        with memoryview(self._content) as content:
            self._borrowed = content[:end]
        return Token(TokenKind.CONTENT, self._borrowed)

    def _release_borrowed(self):
        if self._borrowed is None:
            return
        # Buffers exported from the view by the caller keep it alive,
        # _reset_content then starts over with a fresh buffer.
        with contextlib.suppress(BufferError):
            self._borrowed.release()
        self._borrowed = None

    def _reset_content(self):
        try:
            del self._content[:]
        except BufferError:
            self._content = bytearray()
