import taffy.version
from _taffy.archive import (
    Archive,
    DuplicatePolicy,
    DuplicateTitleError,
    IndexedArchive,
    Section,
)
from _taffy.parser import ArchiveParser, ArchiveSyntaxError, NoncanonicalArchiveWarning
from _taffy.reading import lazy_read, read, read_indexed
from _taffy.scanner import EndOfInput, Scanner, Token, TokenKind, WrongFileModeError

__version__ = taffy.version.version

__all__ = [
    "Archive",
    "ArchiveParser",
    "ArchiveSyntaxError",
    "DuplicatePolicy",
    "DuplicateTitleError",
    "EndOfInput",
    "IndexedArchive",
    "NoncanonicalArchiveWarning",
    "Scanner",
    "Section",
    "Token",
    "TokenKind",
    "WrongFileModeError",
    "lazy_read",
    "read",
    "read_indexed",
]
