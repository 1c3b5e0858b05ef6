from typing import Callable, Dict, List, Optional

from atparser.callbacks import CommandTable
from atparser.results import ExecutionResult

DEFAULT_NAME = 'atparser'
MAX_NAME_LENGTH = 20
MAX_REGISTER = 255


class DemoCommands(CommandTable):
    """
    Example command set served by ``python -m atparser``.

    AT&F           - Factory reset
    AT+NAME?       - Query device name
    AT+NAME=<name> - Set device name
    AT+REG=<n>,<v> - Set register n to integer v
    AT+REG?        - List registers
    AT+INFO, AT+I  - Product information
    AT+RESULT?     - Parsing results of the last reported command line
    """
    def __init__(self, print_response: Callable[[str], None]):
        super().__init__()
        self.print_response = print_response
        self.device_name: str = DEFAULT_NAME
        self.registers: Dict[int, int] = {}

        self.register('F', execute=self.factory_reset)
        self.register('NAME', set=self.set_name, query=self.query_name,
                      test=lambda: self.print_response('+NAME: "<name>"'))
        self.register('REG', set=self.set_register, query=self.query_registers,
                      test=lambda: self.print_response(f'+REG: (0-{MAX_REGISTER}),<value>'))
        self.register('INFO', execute=self.info, aliases=('I',))
        self.register('RESULT', query=self.query_result)

    def factory_reset(self) -> None:
        self.device_name = DEFAULT_NAME
        self.registers = {}

    def set_name(self, parameters: List[str]) -> ExecutionResult:
        if len(parameters) != 1 or not 0 < len(parameters[0]) <= MAX_NAME_LENGTH:
            return ExecutionResult.INVALID_PARAM
        self.device_name = parameters[0]
        return ExecutionResult.OK

    def query_name(self) -> None:
        self.print_response(f'+NAME: "{self.device_name}"')

    @staticmethod
    def _parse_int(value: str) -> Optional[int]:
        try:
            return int(value)
        except ValueError:
            return None

    def set_register(self, parameters: List[str]) -> ExecutionResult:
        if len(parameters) != 2:
            return ExecutionResult.INVALID_PARAM
        register, value = (self._parse_int(p) for p in parameters)
        if register is None or value is None or not 0 <= register <= MAX_REGISTER:
            return ExecutionResult.INVALID_PARAM
        self.registers[register] = value
        return ExecutionResult.OK

    def query_registers(self) -> None:
        for register, value in sorted(self.registers.items()):
            self.print_response(f'+REG: {register},{value}')

    def info(self) -> None:
        self.print_response('AT command parser demo')
        self.print_response(f'Device name: {self.device_name}')
        self.print_response(f'Commands: {len(self.commands)}')

    def query_result(self) -> None:
        results = ','.join(r.name for r in self.line_results) or 'NONE'
        self.print_response(f'+RESULT: {results}')
