"""Exception types raised by game representations and profiles."""


class GameError(Exception):
    """Base class for errors raised by stratspace."""


class UndefinedOperation(GameError):
    """
    Operation not defined for this game representation.

    Raised when a tree-only operation (reduced strategy rebuild, sequence
    counts, behavior profiles) is invoked on a table game, when a table-only
    operation (adding or deleting strategies) is invoked on a tree game, and
    when deleting the last strategy of a player.
    """


class InvalidatedReference(GameError):
    """Access through a handle whose game object was deleted or rebuilt."""


class NFGParseError(GameError, ValueError):
    """Malformed .nfg savefile."""

    def __init__(self, message: str, line: int = 0):
        if line:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line
