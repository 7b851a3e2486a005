class EndOfInput(Exception):
    """
    Raised by a scanner when its byte source is exhausted. This is the
    ordinary way for a token stream to end, and is delivered one call
    after the last content token.
    """

    pass


class WrongFileModeError(Exception):
    """
    Thrown when a taffy archive is opened in text mode, taffy archives
    are scanned as bytes.
    """

    pass
