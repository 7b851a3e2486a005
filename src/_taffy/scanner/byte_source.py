from _taffy.scanner.errors import EndOfInput, WrongFileModeError


class ByteSource:
    """
    Hands out the bytes of a binary stream one at a time.

    The stream is read chunk_size bytes at a time. With the default of 1 the
    position of the stream always sits right after the last byte handed out,
    larger chunks read ahead of the scanner.
    """

    def __init__(self, stream, chunk_size=1):
        """
        :param stream: A binary stream, ie. anything with read(n) returning bytes.
        :param chunk_size: Number of bytes requested from the stream per read.
        """
        self.stream = stream
        self._chunk_size = None
        self.chunk_size = chunk_size
        self._chunk = b""
        self._position = 0

    @property
    def chunk_size(self):
        return self._chunk_size

    @chunk_size.setter
    def chunk_size(self, value):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"chunk_size has to be a positive integer, got {value!r}")
        self._chunk_size = value

    def read1(self):
        """
        :returns: The next byte of the stream as an int.
        :raises EndOfInput: When the stream is exhausted.
        :raises WrongFileModeError: When the stream is a text stream.

        Any error raised by the stream itself is propagated as is.
        """
        if self._position >= len(self._chunk):
            self._fill()
        byte = self._chunk[self._position]
        self._position += 1
        return byte

    def _fill(self):
        chunk = self.stream.read(self.chunk_size)
        if isinstance(chunk, str):
            raise WrongFileModeError("Taffy archive was opened in text mode!")
        if chunk is None:
            raise BlockingIOError("Taffy archives can not be read from non-blocking streams")
        if not chunk:
            raise EndOfInput("Reached end of taffy archive")
        self._chunk = chunk
        self._position = 0
