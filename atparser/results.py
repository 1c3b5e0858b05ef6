from enum import IntEnum


class ExecutionResult(IntEnum):
    """ Pseudo-standard outcome of an AT command action. Negative means error. """
    SEND_FAIL = -3      # Could not hand the command to the underlying stack
    INVALID_PARAM = -2  # Not executed due to invalid or missing parameter(s)
    ERROR = -1
    OK = 0
    SEND_OK = 1         # Accepted by the underlying stack, completion pending

    @property
    def is_success(self) -> bool:
        return self.value >= 0


class ParsingResult(IntEnum):
    """ Why parsing of the last command token failed (or not). """
    OK = 0
    NO_CALLBACKS = 1        # Callbacks not set
    NO_PREAMBLE = 2         # Not an AT command line
    NO_COMMANDS = 3         # AT preamble found but no commands
    INVALID_PREFIX = 4      # Prefix token was not found
    INVALID_CMD1 = 5        # Empty name, buffer overflow or '&' name longer than one letter
    INVALID_CMD2 = 6        # Command name contains non alphabetic characters
    UNSUPPORTED_CMD = 7     # Valid name, unknown to the application
    END_TOKEN_EXPECTED = 8  # ';' or end of line expected but not found
    SET_OVERFLOW = 9        # Parameters of a set command do not fit the buffer
