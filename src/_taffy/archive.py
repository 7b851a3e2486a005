import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import List, Optional

logger = logging.getLogger(__name__)


class DuplicateTitleError(Exception):
    """
    Raised when indexing an archive that has more than one section with
    the same title, and duplicates are not allowed.
    """

    pass


@dataclass(frozen=True)
class Section:
    """
    A single hunk in an archive, a title and the body following its header.
    """

    title: str
    body: bytes


@dataclass
class Archive:
    """
    The sections of a taffy archive in the order they appear. An archive
    with content before its first header keeps that content as comment,
    and is said to be noncanonical.
    """

    comment: Optional[bytes] = None
    sections: List[Section] = field(default_factory=list)

    @property
    def is_canonical(self):
        return self.comment is None

    def titles(self):
        return [section.title for section in self.sections]

    def __iter__(self):
        return iter(self.sections)

    def __len__(self):
        return len(self.sections)


@unique
class DuplicatePolicy(Enum):
    """
    What IndexedArchive does when several sections share a title.
    """

    ERROR = "error"
    FIRST = "first"
    LAST = "last"


class IndexedArchive(Mapping):
    """
    Read only mapping from section title to section, over an archive.

    >>> archive = Archive(sections=[Section("a", b"1"), Section("b", b"2")])
    >>> IndexedArchive(archive)["b"].body
    b'2'

    The archive itself is kept as is, so sections with duplicate titles
    are still found in indexed.archive regardless of the policy.
    """

    def __init__(self, archive, duplicates=DuplicatePolicy.ERROR):
        """
        :param archive: The Archive to index.
        :param duplicates: A DuplicatePolicy (or its value, eg. "last")
            deciding which section is indexed when titles repeat.
        :raises DuplicateTitleError: For repeated titles when duplicates is
            DuplicatePolicy.ERROR.
        """
        self.archive = archive
        self._duplicates = None
        self._index = {}
        self.duplicates = duplicates

    @property
    def duplicates(self):
        return self._duplicates

    @duplicates.setter
    def duplicates(self, value):
        try:
            policy = DuplicatePolicy(value)
        except ValueError as err:
            raise ValueError(
                f"duplicates has to be one of {[p.value for p in DuplicatePolicy]}, "
                f"got {value!r}"
            ) from err
        self._index = self._build_index(policy)
        self._duplicates = policy

    def _build_index(self, policy):
        index = {}
        for section in self.archive.sections:
            if section.title not in index:
                index[section.title] = section
                continue
            if policy == DuplicatePolicy.ERROR:
                raise DuplicateTitleError(
                    f"Archive has more than one section titled {section.title!r}"
                )
            if policy == DuplicatePolicy.LAST:
                index[section.title] = section
            logger.debug(
                "Duplicate section title %r, keeping the %s one",
                section.title,
                policy.value,
            )
        return index

    @property
    def comment(self):
        return self.archive.comment

    @property
    def is_canonical(self):
        return self.archive.is_canonical

    def __getitem__(self, title):
        return self._index[title]

    def __iter__(self):
        return iter(self._index)

    def __len__(self):
        return len(self._index)

    def __repr__(self):
        return f"IndexedArchive({self.archive!r}, duplicates={self.duplicates})"
