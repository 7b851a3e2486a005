"""
In this module, a scanner takes a binary stream containing a taffy archive
and splits it into tokens, one token per call, reading the stream one byte
at a time so that it never reads further than needed.

A taffy archive is line based. A line of the form "-- <title> --" is a
section header, every other line is content. Lines starting with "-" are
read in full before deciding which one they are, and a line that turns out
not to be a header is kept as content verbatim. Malformed headers are
therefore never an error.

The scanner only ever fails because its byte source does, and defers the
failure by one call so that no content is lost.
"""

from .errors import EndOfInput, WrongFileModeError
from .scanner import Scanner
from .token import Token
from .token_kind import TokenKind

__all__ = ["EndOfInput", "Scanner", "Token", "TokenKind", "WrongFileModeError"]
