"""AT command line parser and dispatcher."""

from atparser.buffer import DEFAULT_BUFFER_SIZE, ScratchBuffer
from atparser.callbacks import ATCommandCallbacks, CommandTable
from atparser.parser import ActionKind, ATCommandParser, CommandToken
from atparser.processor import ATCommandProcessor
from atparser.results import ExecutionResult, ParsingResult

__version__ = '0.1.0'

__all__ = [
    'ATCommandCallbacks',
    'ATCommandParser',
    'ATCommandProcessor',
    'ActionKind',
    'CommandTable',
    'CommandToken',
    'DEFAULT_BUFFER_SIZE',
    'ExecutionResult',
    'ParsingResult',
    'ScratchBuffer',
]
