"""Custom exceptions for the mutation engine."""


class EngineError(Exception):
    """Base exception for engine errors."""


class InvalidMoveError(EngineError):
    """A drag refers to a column or card index that does not exist."""


class GatewayError(EngineError):
    """The action gateway could not load projects or a board."""
