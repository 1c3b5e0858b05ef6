import logging
from typing import Callable, Optional

from atparser.buffer import DEFAULT_BUFFER_SIZE
from atparser.callbacks import ATCommandCallbacks
from atparser.line_reader import DEFAULT_MAX_LINE_LENGTH, LineAssembler
from atparser.parser import ATCommandParser
from atparser.results import ExecutionResult

logger = logging.getLogger(__name__)

LINE_TERMINATOR = '\r\n'
DEFAULT_MAX_PAYLOAD = 0  # No fragmentation


class ATCommandProcessor(ATCommandParser):
    """
    AT command parser bound to a byte-oriented peer session.

    Received bytes are assembled into lines and parsed. Responses are
    terminated with CR LF and sent through ``client_output_cb`` in chunks of
    at most ``max_payload`` bytes. Output produced while no peer is
    connected is dropped.
    """
    def __init__(self,
                 client_output_cb: Callable[[bytes], None],
                 callbacks: Optional[ATCommandCallbacks] = None,
                 buffer_size: int = DEFAULT_BUFFER_SIZE,
                 prefix_required: bool = True,
                 max_payload: int = DEFAULT_MAX_PAYLOAD,
                 max_line_length: int = DEFAULT_MAX_LINE_LENGTH):
        super().__init__(callbacks, buffer_size, prefix_required)
        if max_payload < 0:
            raise ValueError(f'Maximum payload must not be negative, got {max_payload}')
        self.client_out_cb = client_output_cb
        self.max_payload = max_payload
        self.connected = False
        self.line_reader = LineAssembler(self.parse_command_line, max_line_length, self._line_overflow)

    # === Session ===
    def on_connect(self) -> None:
        self.connected = True
        self.line_reader.reset()
        logger.info('Peer connected')

    def on_disconnect(self) -> None:
        self.connected = False
        self.line_reader.reset()
        logger.info('Peer disconnected')

    def set_at_callbacks(self, callbacks: Optional[ATCommandCallbacks]) -> None:
        """ Install the application's commands.

        :raises RuntimeError: If called while a peer is connected.
        """
        if self.connected:
            raise RuntimeError('Cannot change AT command callbacks while a peer is connected')
        super().set_at_callbacks(callbacks)

    # === Data transmission ===
    def receive(self, data: bytes) -> None:
        self.line_reader.receive(data)

    def write(self, data: bytes) -> int:
        """ Send bytes to the peer, split to fit the maximum payload.

        :return: Number of bytes sent, 0 if no peer is connected.
        """
        if not self.connected:
            logger.warning('No peer connected, dropping %d bytes of output', len(data))
            return 0
        if not data:
            return 0
        step = self.max_payload or len(data)
        for start in range(0, len(data), step):
            self.client_out_cb(data[start:start + step])
        return len(data)

    def emit(self, line: str) -> None:
        self.write((line + LINE_TERMINATOR).encode('latin1', errors='replace'))

    def _line_overflow(self) -> None:
        self.print_result_response(ExecutionResult.ERROR)
