import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from atparser.results import ExecutionResult, ParsingResult

logger = logging.getLogger(__name__)


class ATCommandCallbacks(ABC):
    """
    Application side of the AT command parser.

    Derive from this class to implement your own AT commands. ``resolve`` and
    the execute/set/query actions are mandatory, the remaining hooks are
    optional no-ops.
    """

    def on_unrecognized_text(self, text: str) -> None:
        """ Custom processing of a received line not starting with "AT". """

    @abstractmethod
    def resolve(self, name: str) -> int:
        """ Identify a supported command name.

        The name carries no prefix (``&`` or ``+``). Aliases and case variants
        may share an ID. Must not have side effects on the parser.

        :param name: Command name.
        :return: A non-negative ID if supported, any negative value otherwise.
        """

    @abstractmethod
    def on_execute(self, command_id: int) -> ExecutionResult:
        """ Execute a supported command with no suffix. """

    @abstractmethod
    def on_set(self, command_id: int, parameters: List[str]) -> ExecutionResult:
        """ Execute or set the value given in a command with the '=' suffix.

        :param command_id: ID as returned by ``resolve``.
        :param parameters: Parameters from left to right, possibly empty strings.
        :return: Result of command execution.
        """

    @abstractmethod
    def on_query(self, command_id: int) -> ExecutionResult:
        """ Print the value requested by a command with the '?' suffix. """

    def on_test(self, command_id: int) -> None:
        """ Print the syntax of a command with the '=?' suffix. """

    def on_finished(self, index: int, parsing_result: ParsingResult) -> None:
        """ Get informed of the parsing result of each command in a line.

        Called after the command is parsed and, if no parsing error was found,
        executed. Commands following a parsing error are neither parsed nor
        reported.

        :param index: 0-based position of the command in the line. In
            "AT&F;&G;&H", index 1 refers to "&G".
        :param parsing_result: Detailed result of command parsing.
        """


Handler = Callable[..., Optional[ExecutionResult]]


@dataclass
class CommandEntry:
    name: str
    execute: Optional[Handler] = None
    set: Optional[Handler] = None
    query: Optional[Handler] = None
    test: Optional[Callable[[], None]] = None


class CommandTable(ATCommandCallbacks):
    """
    Callbacks backed by a registry of named commands.

    Each command gets its own handlers; an action with no handler answers
    ERROR. Handlers returning None count as OK.
    """
    def __init__(self, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self.commands: List[CommandEntry] = []
        self.names: Dict[str, int] = {}
        self.line_results: List[ParsingResult] = []
        self.last_parsing_result: Optional[ParsingResult] = None

    def _key(self, name: str) -> str:
        return name if self.case_sensitive else name.upper()

    def register(self,
                 name: str,
                 execute: Optional[Callable[[], Optional[ExecutionResult]]] = None,
                 set: Optional[Callable[[List[str]], Optional[ExecutionResult]]] = None,
                 query: Optional[Callable[[], Optional[ExecutionResult]]] = None,
                 test: Optional[Callable[[], None]] = None,
                 aliases: Iterable[str] = ()) -> int:
        """ Add a command to the table.

        :param name: Command name without prefix.
        :param aliases: Other names resolving to the same command.
        :return: The command ID.
        """
        keys = [self._key(n) for n in (name, *aliases)]
        for key in keys:
            if not key:
                raise ValueError('Command names must not be empty')
            if key in self.names:
                raise ValueError(f'Command {key!r} is already registered')

        command_id = len(self.commands)
        self.commands.append(CommandEntry(name, execute, set, query, test))
        for key in keys:
            self.names[key] = command_id
        return command_id

    def resolve(self, name: str) -> int:
        return self.names.get(self._key(name), -1)

    def _run(self, handler: Optional[Handler], *args) -> ExecutionResult:
        if handler is None:
            return ExecutionResult.ERROR
        result = handler(*args)
        return ExecutionResult.OK if result is None else ExecutionResult(result)

    def on_execute(self, command_id: int) -> ExecutionResult:
        return self._run(self.commands[command_id].execute)

    def on_set(self, command_id: int, parameters: List[str]) -> ExecutionResult:
        return self._run(self.commands[command_id].set, parameters)

    def on_query(self, command_id: int) -> ExecutionResult:
        return self._run(self.commands[command_id].query)

    def on_test(self, command_id: int) -> None:
        test = self.commands[command_id].test
        if test is not None:
            test()

    def on_finished(self, index: int, parsing_result: ParsingResult) -> None:
        if index == 0:
            self.line_results = []
        self.line_results.append(parsing_result)
        self.last_parsing_result = parsing_result
        if parsing_result != ParsingResult.OK:
            logger.debug('Command %d rejected: %s', index, parsing_result.name)
