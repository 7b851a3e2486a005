import io
from unittest.mock import MagicMock

import pytest
from hypothesis import given

from _taffy.scanner import EndOfInput, Scanner, WrongFileModeError
from _taffy.scanner.scanner import header_title
from _taffy.scanner.token import Token
from _taffy.scanner.token_kind import TokenKind

from .generators.taffy_file_contents import archive_contents, tricky_file_contents


def header(title):
    return Token(TokenKind.HEADER, title)


def content(value):
    return Token(TokenKind.CONTENT, value)


def scan_all(contents, chunk_size=1):
    scanner = Scanner(io.BytesIO(contents), chunk_size=chunk_size)
    return [token.copy() for token in scanner]


def failing_stream(contents, error):
    stream = MagicMock()
    stream.read.side_effect = [bytes([b]) for b in contents] + [error]
    return stream


@pytest.mark.parametrize(
    "contents, expected",
    [
        (b"", [content(b"")]),
        (b"-- a --\n", [header(b"a"), content(b"")]),
        (
            b"-- a --\nx\n-- b --\n",
            [header(b"a"), content(b"x"), header(b"b"), content(b"")],
        ),
        (
            b"-- a --\n-- b --\n",
            [header(b"a"), content(b""), header(b"b"), content(b"")],
        ),
        (b"hello\n-- a --\n", [content(b"hello"), header(b"a"), content(b"")]),
        (b"-- a --\nlast line\n", [header(b"a"), content(b"last line\n")]),
        (b"-- a --\nno linebreak", [header(b"a"), content(b"no linebreak")]),
        (b"-- a --\n\tx\n\ty\n", [header(b"a"), content(b"x\ny\n")]),
        (b"-- a --\n\t\tx", [header(b"a"), content(b"\tx")]),
        (b"-- a --\nx\n\ty", [header(b"a"), content(b"x\ny")]),
    ],
)
def test_scan(contents, expected):
    assert scan_all(contents) == expected


@pytest.mark.parametrize(
    "line",
    [b"- not a header -", b"-", b"--", b"-- --", b"-- a", b"-- a--", b"--a --"],
)
def test_not_a_header_is_content(line):
    assert scan_all(b"-- a --\n" + line + b"\n-- b --\n") == [
        header(b"a"),
        content(line),
        header(b"b"),
        content(b""),
    ]


def test_not_a_header_as_leading_comment():
    assert scan_all(b"- not a header -\n") == [content(b"- not a header -\n")]


def test_unterminated_header_is_content():
    assert scan_all(b"-- a --\nx\n-- b --") == [
        header(b"a"),
        content(b"x\n-- b --"),
    ]


@pytest.mark.parametrize(
    "line, title",
    [
        (b"--  --", b""),
        (b"-- a --", b"a"),
        (b"--   spaced  out   --", b"  spaced  out  "),
        (b"-- -- --", b"--"),
        (b"-- \t --", b"\t"),
    ],
)
def test_header_title(line, title):
    assert header_title(line) == title
    assert scan_all(line + b"\n") == [header(title), content(b"")]


@pytest.mark.parametrize(
    "body, expected",
    [
        (b"\n", b""),
        (b"\n\n", b"\n"),
        (b"\n\n\n", b"\n\n"),
        (b"\n\n\n\n", b"\n\n\n"),
        (b"\n\t\n", b"\n"),
        (b"\n\t\n\n", b"\n\n"),
        (b"\n\nx\n", b"\n\nx"),
        (b"\nx\n\n\n", b"x\n\n"),
    ],
)
def test_blank_lines_before_header(body, expected):
    assert scan_all(b"-- a --" + body + b"-- b --\n")[1] == content(expected)


@pytest.mark.parametrize(
    "body, expected",
    [
        (b"\n", b""),
        (b"\n\n", b"\n\n"),
        (b"\n\n\n", b"\n\n\n"),
        (b"\nx", b"x"),
    ],
)
def test_blank_lines_at_end_of_file(body, expected):
    assert scan_all(b"-- a --" + body)[1] == content(expected)


def test_leading_blank_line():
    assert scan_all(b"\n-- a --\n") == [content(b"\n"), header(b"a"), content(b"")]


def test_header_is_returned_on_next_scan_without_reading():
    stream = io.BytesIO(b"x\n-- a --\ny")
    scanner = Scanner(stream)
    assert scanner.scan().copy() == content(b"x")
    position = stream.tell()
    assert scanner.scan() == header(b"a")
    assert stream.tell() == position


def test_scanner_reads_no_further_than_token():
    stream = io.BytesIO(b"-- a --\nbody")
    scanner = Scanner(stream)
    scanner.scan()
    assert stream.tell() == len(b"-- a --\n")


def test_end_of_input_is_delivered_after_content():
    scanner = Scanner(io.BytesIO(b"-- a --\nx"))
    assert scanner.scan() == header(b"a")
    assert scanner.scan().copy() == content(b"x")
    with pytest.raises(EndOfInput):
        scanner.scan()


def test_scan_after_end_of_input_raises_again():
    scanner = Scanner(io.BytesIO(b""))
    assert scanner.scan().copy() == content(b"")
    with pytest.raises(EndOfInput):
        scanner.scan()
    with pytest.raises(EndOfInput):
        scanner.scan()


def test_stream_error_is_deferred_one_scan():
    error = OSError("device not ready")
    scanner = Scanner(failing_stream(b"-- a --\nx", error))

    assert scanner.scan() == header(b"a")
    assert scanner.scan().copy() == content(b"x")
    with pytest.raises(OSError) as raised:
        scanner.scan()
    assert raised.value is error


def test_stream_error_in_header_candidate_keeps_content():
    scanner = Scanner(failing_stream(b"x\n-- a", OSError()))

    assert scanner.scan().copy() == content(b"x\n-- a")
    with pytest.raises(OSError):
        scanner.scan()


def test_stream_error_stops_iteration():
    scanner = Scanner(failing_stream(b"-- a --\n", OSError()))
    tokens = iter(scanner)

    assert next(tokens) == header(b"a")
    assert next(tokens).copy() == content(b"")
    with pytest.raises(OSError):
        next(tokens)


def test_text_stream_is_wrong_file_mode():
    scanner = Scanner(io.StringIO("-- a --\n"))

    assert scanner.scan().copy() == content(b"")
    with pytest.raises(WrongFileModeError):
        scanner.scan()


def test_content_is_released_on_next_scan():
    scanner = Scanner(io.BytesIO(b"x\n-- a --\n"))
    borrowed = scanner.scan()
    kept = borrowed.copy()

    scanner.scan()

    with pytest.raises(ValueError):
        bytes(borrowed.value)
    assert kept == content(b"x")


def test_content_slices_outlive_next_scan():
    scanner = Scanner(io.BytesIO(b"xy\n-- a --\nz"))
    part = scanner.scan().value[:1]

    assert scanner.scan() == header(b"a")
    assert scanner.scan().copy() == content(b"z")
    assert bytes(part) == b"x"


@pytest.mark.parametrize("chunk_size", [0, -1, 1.5, "1", True])
def test_invalid_chunk_size(chunk_size):
    with pytest.raises(ValueError, match="chunk_size"):
        Scanner(io.BytesIO(), chunk_size=chunk_size)


@given(tricky_file_contents())
def test_content_and_header_alternate(contents):
    kinds = [token.kind for token in scan_all(contents)]

    for first, second in zip(kinds, kinds[1:]):
        assert first != second
    assert kinds[-1] == TokenKind.CONTENT


@given(tricky_file_contents())
def test_rescan_gives_same_tokens(contents):
    assert scan_all(contents) == scan_all(contents)


@given(tricky_file_contents())
def test_chunk_size_does_not_change_tokens(contents):
    assert scan_all(contents, chunk_size=7) == scan_all(contents)


@given(archive_contents())
def test_scan_archive_sections(archive):
    sections, contents = archive

    expected = []
    for title, body in sections:
        expected += [header(title), content(body)]

    assert scan_all(contents) == expected
