import logging
import pathlib
from contextlib import contextmanager

from _taffy.archive import DuplicatePolicy, IndexedArchive
from _taffy.parser import ArchiveParser
from _taffy.scanner import Scanner

logger = logging.getLogger(__name__)


def read(filelike, encoding="utf-8", chunk_size=1, warn_noncanonical=True):
    """
    Reads a taffy archive and returns its Archive,
    ie. archive = read("/my/fixtures.taf")

    :param filelike: Path to the archive, or a binary stream
        positioned at its start.
    :param encoding: The encoding of section titles.
    :param chunk_size: Number of bytes read from the file at a time.
    :param warn_noncanonical: Whether to warn when the archive has a
        leading comment.
    """
    with open_archive(filelike) as stream:
        parser = ArchiveParser(
            Scanner(stream, chunk_size=chunk_size),
            encoding=encoding,
            warn_noncanonical=warn_noncanonical,
        )
        return parser.parse()


def read_indexed(filelike, duplicates=DuplicatePolicy.ERROR, **kwargs):
    """
    Reads a taffy archive and indexes its sections by title,
    ie. read_indexed("/my/fixtures.taf")["basic/fixture"].body

    :param duplicates: See IndexedArchive.
    :param kwargs: Passed on to read.
    """
    return IndexedArchive(read(filelike, **kwargs), duplicates=duplicates)


@contextmanager
def open_archive(filelike):
    if not isinstance(filelike, (str, pathlib.Path)):
        yield filelike
        return

    logger.debug("Opening taffy archive %s", filelike)
    with open(filelike, "rb") as file_stream:
        yield file_stream


@contextmanager
def lazy_read(filelike, encoding="utf-8", chunk_size=1, warn_noncanonical=True):
    """
    Reads the sections of a taffy archive one at a time,

    >>> with lazy_read("/my/fixtures.taf") as sections:
    ...     for section in sections:
    ...         print(section.title)

    The sections are produced by an ArchiveParser, which holds the leading
    comment of the archive in sections.comment once it has been read.
    Files opened from a path are closed when leaving the context.
    """
    with open_archive(filelike) as stream:
        parser = ArchiveParser(
            Scanner(stream, chunk_size=chunk_size),
            encoding=encoding,
            warn_noncanonical=warn_noncanonical,
        )
        yield parser
