"""
Linear undo/redo history and replay of persisted commands.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from monopoly_core.commands import Command, command_from_transport
from monopoly_core.commands.transport import TransportModel
from monopoly_core.exceptions import ReplayError
from monopoly_core.game import GameState
from monopoly_core.results import CommandResult, FailureReason


logger = logging.getLogger(__name__)


class CommandHistory:
    """
    Executed commands, most recent last.

    Pushing a command after an undo discards the redo tail. Undo stops at
    commands that cannot be reversed (ending a turn, bankruptcy).
    """

    def __init__(self):
        self._done: List[Command] = []
        self._undone: List[Command] = []

    def __len__(self) -> int:
        return len(self._done)

    def push(self, command: Command) -> None:
        if not command.executed:
            raise ValueError(f"Only executed commands can be recorded, got {command!r}")
        self._done.append(command)
        self._undone.clear()

    def execute(self, command: Command) -> CommandResult:
        """Execute a command and record it if it succeeds."""
        result = command.execute()
        if result.success:
            self.push(command)
        return result

    def can_undo(self) -> bool:
        return bool(self._done) and self._done[-1].reversible

    def can_redo(self) -> bool:
        return bool(self._undone)

    def undo(self) -> CommandResult:
        if not self._done:
            return CommandResult.fail(FailureReason.NOTHING_TO_UNDO, "Nothing to undo")
        command = self._done[-1]
        if not command.reversible:
            return CommandResult.fail(FailureReason.IRREVERSIBLE, f"{command.kind} cannot be undone")
        self._done.pop()
        command.undo()
        self._undone.append(command)
        logger.debug(f"Undid {command.kind}, {len(self._undone)} to redo")
        return CommandResult.ok(f"Undid {command.kind}", command=command.kind)

    def redo(self) -> CommandResult:
        if not self._undone:
            return CommandResult.fail(FailureReason.NOTHING_TO_REDO, "Nothing to redo")
        command = self._undone[-1]
        result = command.execute()
        if result.success:
            self._undone.pop()
            self._done.append(command)
        return result

    @property
    def last(self) -> Optional[Command]:
        return self._done[-1] if self._done else None

    def commands(self) -> List[Command]:
        return list(self._done)

    def transports(self) -> List[TransportModel]:
        """The persisted form of every executed command, in order."""
        return [command.to_transport() for command in self._done]

    @classmethod
    def replay(
        cls,
        game: GameState,
        transports: Iterable[Union[TransportModel, Mapping[str, Any]]],
    ) -> "CommandHistory":
        """
        Execute a persisted sequence against ``game`` in order.

        Raises ReplayError at the first command that fails; the commands
        before it stay applied.
        """
        history = cls()
        for index, data in enumerate(transports):
            command = command_from_transport(game, data)
            result = history.execute(command)
            if not result.success:
                raise ReplayError(index, f"{command.kind}: {result.message}")
        logger.info(f"Replayed {len(history)} commands")
        return history
