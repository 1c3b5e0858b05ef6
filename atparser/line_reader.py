import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINE_LENGTH = 256
LINE_ENDINGS = ('\r', '\n')
BACKSPACE = ('\x7f', '\b')


class LineAssembler:
    """
    Turn a byte stream into complete text lines.

    A line ends at CR or LF; empty lines are ignored, so CR LF pairs yield a
    single line. Backspace and DEL remove the previous character. A line
    growing past ``max_line_length`` is discarded up to its terminator and
    reported through ``overflow_cb``.
    """
    def __init__(self,
                 line_cb: Callable[[str], None],
                 max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
                 overflow_cb: Optional[Callable[[], None]] = None):
        if max_line_length < 1:
            raise ValueError(f'Maximum line length must be positive, got {max_line_length}')
        self.line_cb = line_cb
        self.overflow_cb = overflow_cb
        self.max_line_length = max_line_length
        self.line_buffer: str = ''
        self.overflowed = False

    def receive(self, data: bytes) -> None:
        for byte in data:
            self._receive_char(chr(byte))

    def _receive_char(self, char: str) -> None:
        if char in LINE_ENDINGS:
            line, overflowed = self.line_buffer, self.overflowed
            self.reset()
            if overflowed:
                logger.warning('Discarded line longer than %d characters', self.max_line_length)
                if self.overflow_cb is not None:
                    self.overflow_cb()
            elif line:
                self.line_cb(line)
            return

        if self.overflowed:
            return

        if char in BACKSPACE:
            self.line_buffer = self.line_buffer[:-1]
            return

        if len(self.line_buffer) >= self.max_line_length:
            self.overflowed = True
            self.line_buffer = ''
            return

        self.line_buffer += char

    def reset(self) -> None:
        self.line_buffer = ''
        self.overflowed = False
