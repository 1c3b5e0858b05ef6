from typing import List, Tuple

DEFAULT_BUFFER_SIZE = 42
TERMINATOR = 0


class ScratchBuffer:
    """
    Fixed-capacity arena holding a command name and its parameters.

    Every stored string takes its length plus one terminator byte. A store
    that would exceed the capacity is refused before anything is written.
    """
    def __init__(self, capacity: int = DEFAULT_BUFFER_SIZE):
        if capacity < 1:
            raise ValueError(f'Buffer capacity must be positive, got {capacity}')
        self.capacity = capacity
        self.data = bytearray(capacity)
        self.length = 0
        self.slots: List[Tuple[int, int]] = []

    @property
    def free(self) -> int:
        return self.capacity - self.length

    def store(self, text: str) -> bool:
        """ Append a terminated string.

        :param text: Text to store, encodable as latin-1.
        :return: False, with the buffer untouched, if it does not fit.
        """
        encoded = text.encode('latin1', errors='replace')
        if len(encoded) + 1 > self.free:
            return False
        start = self.length
        self.data[start:start + len(encoded)] = encoded
        self.data[start + len(encoded)] = TERMINATOR
        self.length += len(encoded) + 1
        self.slots.append((start, len(encoded)))
        return True

    def get(self, index: int) -> str:
        start, size = self.slots[index]
        return self.data[start:start + size].decode('latin1')

    def strings(self, first: int = 0) -> List[str]:
        return [self.get(i) for i in range(first, len(self.slots))]

    def clear(self) -> None:
        self.slots.clear()
        self.length = 0

    def __len__(self) -> int:
        return self.length
