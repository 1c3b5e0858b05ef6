import logging
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from atparser.buffer import DEFAULT_BUFFER_SIZE, ScratchBuffer
from atparser.callbacks import ATCommandCallbacks
from atparser.results import ExecutionResult, ParsingResult

logger = logging.getLogger(__name__)

PREAMBLE = 'AT'
DELIMITER = ';'
PARAMETER_SEPARATOR = ','
PREFIXES = ('&', '+')
NAME_STOP = ('=', '?', DELIMITER)
NAME_CHARACTERS = frozenset(string.ascii_letters)


class ActionKind(Enum):
    EXECUTE = ''
    SET = '='
    QUERY = '?'
    TEST = '=?'


@dataclass
class CommandToken:
    """ One command of a command line, valid for a single dispatch. """
    prefix: str
    name: str
    action: ActionKind = ActionKind.EXECUTE
    parameters: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        text = f'{self.prefix}{self.name}{self.action.value}'
        if self.action == ActionKind.SET:
            text += PARAMETER_SEPARATOR.join(self.parameters)
        return text


class ATCommandParser:
    """
    Parse AT command lines and dispatch each command to the registered callbacks.

    A line is "AT" followed by one or more commands separated by ';'. Each
    command is a prefix ('&' or '+'), an alphabetic name and an optional
    suffix: '=' with comma separated parameters (set), '?' (query) or '=?'
    (test). No suffix means execute. The first parsing error abandons the
    rest of the line.

    Subclasses provide ``emit`` to place response lines on their transport.
    """
    def __init__(self,
                 callbacks: Optional[ATCommandCallbacks] = None,
                 buffer_size: int = DEFAULT_BUFFER_SIZE,
                 prefix_required: bool = True):
        self.callbacks = callbacks
        self.buffer_size = DEFAULT_BUFFER_SIZE
        self.set_buffer_size(buffer_size)
        self.prefix_required = prefix_required
        # Exposed for testing
        self.last_parsing_result = ParsingResult.OK

    def set_at_callbacks(self, callbacks: Optional[ATCommandCallbacks]) -> None:
        """ Install the application's commands. None makes every parse fail. """
        self.callbacks = callbacks

    def set_buffer_size(self, size: int) -> None:
        """ Bytes available for a command name and its parameters, terminators included. """
        if size < 1:
            raise ValueError(f'Buffer size must be positive, got {size}')
        self.buffer_size = size

    # === Output ===
    def emit(self, line: str) -> None:
        raise NotImplementedError

    def print_at_response(self, message: str) -> None:
        """ Print a message as an AT response line.

        :param message: Text to print. Must not contain CR or LF, the line
            terminator is added by the transport.
        """
        if '\r' in message or '\n' in message:
            raise ValueError('AT responses must not contain line terminators')
        self.emit(message)

    def print_result_response(self, result: ExecutionResult) -> None:
        self.print_at_response('OK' if ExecutionResult(result).is_success else 'ERROR')

    # === Parsing ===
    def _fail(self, result: ParsingResult) -> None:
        self.last_parsing_result = result
        self.print_result_response(ExecutionResult.ERROR)
        return None

    def parse_command_line(self, text: str) -> None:
        """ Parse and execute every command in a received line.

        :param text: One line without its terminator. A NUL character ends it.
        """
        text = text.split('\0', 1)[0]

        if self.callbacks is None:
            logger.warning('AT command line received with no callbacks set')
            self._fail(ParsingResult.NO_CALLBACKS)
            return

        if not text.startswith(PREAMBLE):
            self.last_parsing_result = ParsingResult.NO_PREAMBLE
            self.callbacks.on_unrecognized_text(text)
            return

        pos: Optional[int] = len(PREAMBLE)
        if pos >= len(text):
            self._fail(ParsingResult.NO_COMMANDS)
            return

        buffer = ScratchBuffer(self.buffer_size)
        index = 0
        while pos is not None and pos < len(text):
            buffer.clear()
            pos = self.parse_single_command(text, pos, buffer)
            self.callbacks.on_finished(index, self.last_parsing_result)
            index += 1

    def parse_single_command(self, text: str, pos: int, buffer: ScratchBuffer) -> Optional[int]:
        """ Parse and dispatch the command starting at ``pos``.

        :return: Where the next command starts, or None on a parsing error.
        """
        prefix = ''
        if text[pos] in PREFIXES:
            prefix = text[pos]
            pos += 1
        elif self.prefix_required:
            return self._fail(ParsingResult.INVALID_PREFIX)

        end = pos
        while end < len(text) and text[end] not in NAME_STOP:
            end += 1
            if end - pos >= buffer.free:
                # No room left for the name and its terminator
                return self._fail(ParsingResult.INVALID_CMD1)
        name = text[pos:end]
        if not name or (prefix == '&' and len(name) > 1) or not buffer.store(name):
            return self._fail(ParsingResult.INVALID_CMD1)
        if not NAME_CHARACTERS.issuperset(name):
            return self._fail(ParsingResult.INVALID_CMD2)

        command_id = self.callbacks.resolve(name)
        if command_id < 0:
            return self._fail(ParsingResult.UNSUPPORTED_CMD)

        token = CommandToken(prefix, name)
        pos = end
        if text.startswith('=?', pos):
            token.action = ActionKind.TEST
            pos += 2
        elif text.startswith('=', pos):
            token.action = ActionKind.SET
            return self.parse_write_parameters(text, pos + 1, buffer, token, command_id)
        elif text.startswith('?', pos):
            token.action = ActionKind.QUERY
            pos += 1

        if pos < len(text) and text[pos] != DELIMITER:
            return self._fail(ParsingResult.END_TOKEN_EXPECTED)

        self.dispatch(token, command_id)
        return pos + 1

    def parse_write_parameters(self,
                               text: str,
                               pos: int,
                               buffer: ScratchBuffer,
                               token: CommandToken,
                               command_id: int) -> Optional[int]:
        first = len(buffer.slots)
        while True:
            end = pos
            while end < len(text) and text[end] not in (PARAMETER_SEPARATOR, DELIMITER):
                end += 1
                if end - pos >= buffer.free:
                    return self._fail(ParsingResult.SET_OVERFLOW)
            if not buffer.store(text[pos:end]):
                return self._fail(ParsingResult.SET_OVERFLOW)
            if end < len(text) and text[end] == PARAMETER_SEPARATOR:
                pos = end + 1
                continue
            break

        token.parameters = buffer.strings(first)
        self.dispatch(token, command_id)
        return end + 1

    # === Dispatch ===
    def dispatch(self, token: CommandToken, command_id: int) -> None:
        self.last_parsing_result = ParsingResult.OK
        logger.debug('Dispatching %s (id %d)', token, command_id)

        if token.action == ActionKind.EXECUTE:
            result = self.callbacks.on_execute(command_id)
        elif token.action == ActionKind.SET:
            result = self.callbacks.on_set(command_id, token.parameters)
        elif token.action == ActionKind.QUERY:
            result = self.callbacks.on_query(command_id)
        else:
            self.callbacks.on_test(command_id)
            result = ExecutionResult.OK

        result = ExecutionResult(result)
        if not result.is_success:
            logger.debug('%s failed: %s', token, result.name)
        self.print_result_response(result)
