from enum import Enum, auto, unique


@unique
class TokenKind(Enum):
    HEADER = auto()
    CONTENT = auto()
