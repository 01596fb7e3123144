"""
Exception hierarchy for the rules core.

Expected business failures (insufficient funds, already owned, ...) are
never raised; they come back as failed CommandResults. These exceptions
signal programmer errors and corrupted input, and are raised before any
state is touched.
"""


class MonopolyError(Exception):
    """Base exception for all game-related errors."""


class InvariantViolationError(MonopolyError):
    """A command was built from impossible inputs."""


class CommandStateError(MonopolyError):
    """A command was undone or redone out of order."""


class InvalidActionError(MonopolyError):
    """Intent could not be turned into a command."""


class ReplayError(MonopolyError):
    """A persisted command sequence failed to replay."""

    def __init__(self, index: int, message: str):
        super().__init__(f"Replay failed at command {index}: {message}")
        self.index = index
