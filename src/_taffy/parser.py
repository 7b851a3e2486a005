"""
The parser consumes from an iterator of tokens (see _taffy.scanner) and
folds them into the sections of an archive. Headers and content alternate,
so a section is complete as soon as the content following its header is
seen, and sections can be generated one at a time.
"""

import codecs
import warnings

from _taffy.archive import Archive, Section


class ArchiveSyntaxError(Exception):
    """
    Raised by the parser if the tokens do not alternate between header and
    content, or if a title cannot be decoded.
    """

    pass


class NoncanonicalArchiveWarning(UserWarning):
    """
    Emitted when an archive has content before its first header.
    """

    pass


class ArchiveParser:
    """
    A lazy parser of taffy archives, ie. consumes the output of a
    Scanner and is an iterable of sections.

    >>> scanner = Scanner(io.BytesIO(b"-- a --\\n\\tx\\n-- b --\\n"))
    >>> list(ArchiveParser(scanner))
    [Section(title='a', body=b'x'), Section(title='b', body=b'')]

    Content before the first header is not a section, it is found in
    parser.comment once it has been parsed.
    """

    def __init__(self, tokens, encoding="utf-8", warn_noncanonical=True):
        """
        :param tokens: iterable of tokens, ie. a Scanner.
        :param encoding: The encoding used to decode section titles.
        :param warn_noncanonical: Whether to emit a NoncanonicalArchiveWarning
            for archives with a leading comment.
        """
        self.tokens = tokens
        self.warn_noncanonical = warn_noncanonical
        self.comment = None

        self._encoding = None
        self.encoding = encoding

    @property
    def encoding(self):
        return self._encoding

    @encoding.setter
    def encoding(self, value):
        try:
            codecs.lookup(value)
        except LookupError as err:
            raise ValueError(f"Unknown encoding for section titles: {value}") from err
        self._encoding = value

    def decode_title(self, title):
        try:
            return bytes(title).decode(self.encoding)
        except UnicodeDecodeError as err:
            raise ArchiveSyntaxError(
                f"Could not decode section title {bytes(title)!r} as {self.encoding}"
            ) from err

    def parse_leading_comment(self, token):
        # Only an empty archive starts with empty content.
        if not token.value:
            return
        self.comment = bytes(token.value)
        if self.warn_noncanonical:
            warnings.warn(
                "Taffy archive has a leading comment before its first section, "
                "the archive is not canonical.",
                NoncanonicalArchiveWarning,
            )

    def __iter__(self):
        title = None
        is_first = True
        for token in self.tokens:
            if token.is_header:
                if title is not None:
                    raise ArchiveSyntaxError(
                        f"Expected body of section {title!r}, found another header"
                    )
                title = self.decode_title(token.value)
            elif title is not None:
                # Bodies are copied out of the scanner before it moves on.
                yield Section(title, bytes(token.value))
                title = None
            elif is_first:
                self.parse_leading_comment(token)
            else:
                raise ArchiveSyntaxError("Expected section header, found content")
            is_first = False

        if title is not None:
            yield Section(title, b"")

    def parse(self):
        """
        :returns: The Archive of all remaining tokens.
        """
        sections = list(self)
        return Archive(comment=self.comment, sections=sections)
