from dataclasses import dataclass
from typing import Union

from _taffy.scanner.token_kind import TokenKind


@dataclass
class Token:
    """
    A token in a taffy archive, either a section header or a hunk of content.

    For kind=TokenKind.HEADER the value is the title as bytes, which may be
    empty. For kind=TokenKind.CONTENT the value is a memoryview borrowed from
    the scanner that produced it: it is only valid until the next call to
    Scanner.scan, after which it is released. Use copy() to keep it.
    """

    kind: TokenKind
    value: Union[bytes, memoryview]

    @property
    def is_header(self):
        return self.kind == TokenKind.HEADER

    @property
    def is_content(self):
        return self.kind == TokenKind.CONTENT

    def copy(self):
        """
        :returns: A token with the same kind owning a bytes copy of the value,
            safe to keep after the next scan.
        """
        return Token(self.kind, bytes(self.value))

    def __bytes__(self):
        return bytes(self.value)

    def __repr__(self):
        try:
            value = bytes(self.value)
        except ValueError:
            return f"Token({self.kind}, <released>)"
        return f"Token({self.kind}, {value!r})"
