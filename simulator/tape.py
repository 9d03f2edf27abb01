from abc import ABC, abstractmethod
from itertools import chain
from enum import Enum

import numpy as np

from simulator.errors import InvalidProgram, ProgramErrorKind


class Symbol(Enum):
    """A segment on the tape."""

    ZERO = "0"
    ONE = "1"
    BLANK = "_"

    @classmethod
    def parse(cls, token):
        if token == "1":
            return cls.ONE
        if token == "0":
            return cls.ZERO
        if token in ("_", " "):
            return cls.BLANK
        raise InvalidProgram(ProgramErrorKind.INVALID_SEGMENT)

    @property
    def token(self):
        return self.value

    def __str__(self):
        return self.value


class Tape(ABC):
    """
    An infinite working buffer for the Turing machine.

    Moving past either edge of the known segments creates a blank
    segment on demand, so the cursor always points at a real cell.
    """

    @abstractmethod
    def move_right(self):
        ...

    @abstractmethod
    def move_left(self):
        ...

    @abstractmethod
    def write(self, symbol):
        ...

    @abstractmethod
    def read(self):
        ...

    @property
    @abstractmethod
    def position(self):
        """Cursor index into the materialized cells."""

    @abstractmethod
    def __iter__(self):
        ...

    @abstractmethod
    def __len__(self):
        ...

    def symbols(self):
        return list(self)

    def __str__(self):
        return "".join(symbol.token for symbol in self)

    def __repr__(self):
        return f"{type(self).__name__}({str(self)!r}, position={self.position})"


def _check_position(cells, position):
    if not 0 <= position < len(cells):
        raise ValueError(f"Cursor position {position} is outside the tape (length {len(cells)}).")


class ListTape(Tape):
    """
    Tape backed by two lists growing away from the starting cell.

    `_right` holds cells 0, 1, 2, ... and `_left` holds cells -1, -2, ...
    so both growth and access are O(1) list operations.
    """

    def __init__(self, symbols, position=0):
        self._right = list(symbols)
        _check_position(self._right, position)
        self._left = []
        self._pos = position

    def move_right(self):
        self._pos += 1
        if self._pos == len(self._right):
            self._right.append(Symbol.BLANK)

    def move_left(self):
        self._pos -= 1
        if self._pos < -len(self._left):
            self._left.append(Symbol.BLANK)

    def write(self, symbol):
        if self._pos >= 0:
            self._right[self._pos] = symbol
        else:
            self._left[-self._pos - 1] = symbol

    def read(self):
        if self._pos >= 0:
            return self._right[self._pos]
        return self._left[-self._pos - 1]

    @property
    def position(self):
        return self._pos + len(self._left)

    def __iter__(self):
        return chain(reversed(self._left), self._right)

    def __len__(self):
        return len(self._left) + len(self._right)


# Cell codes stored in ArrayTape buffers
_SYMBOLS = (Symbol.ZERO, Symbol.ONE, Symbol.BLANK)
_CODES = {symbol: code for code, symbol in enumerate(_SYMBOLS)}
_BLANK_CODE = _CODES[Symbol.BLANK]


class ArrayTape(Tape):
    """
    Tape backed by a numpy buffer.

    The buffer is pre-filled with blanks and the materialized window
    [lo, hi) sits inside it. When the window reaches a buffer edge the
    buffer doubles and the window is re-centred.
    """

    def __init__(self, symbols, position=0):
        codes = np.array([_CODES[s] for s in symbols], dtype=np.int8)
        _check_position(codes, position)
        capacity = 2 * len(codes) + 2
        self._buffer = np.full(capacity, _BLANK_CODE, dtype=np.int8)
        self._lo = (capacity - len(codes)) // 2
        self._hi = self._lo + len(codes)
        self._buffer[self._lo:self._hi] = codes
        self._pos = self._lo + position

    def _grow(self):
        width = self._hi - self._lo
        capacity = 2 * len(self._buffer) + 2
        offset = (capacity - width) // 2
        buffer = np.full(capacity, _BLANK_CODE, dtype=np.int8)
        buffer[offset:offset + width] = self._buffer[self._lo:self._hi]
        self._pos += offset - self._lo
        self._lo = offset
        self._hi = offset + width
        self._buffer = buffer

    def move_right(self):
        self._pos += 1
        if self._pos == self._hi:
            if self._hi == len(self._buffer):
                self._grow()
            self._hi += 1

    def move_left(self):
        if self._pos == self._lo:
            if self._lo == 0:
                self._grow()
            self._lo -= 1
            self._pos = self._lo
        else:
            self._pos -= 1

    def write(self, symbol):
        self._buffer[self._pos] = _CODES[symbol]

    def read(self):
        return _SYMBOLS[self._buffer[self._pos]]

    @property
    def position(self):
        return self._pos - self._lo

    def __iter__(self):
        return (_SYMBOLS[code] for code in self._buffer[self._lo:self._hi])

    def __len__(self):
        return self._hi - self._lo


TAPE_BACKENDS = {
    "list": ListTape,
    "array": ArrayTape,
}


def parse_tape(text, tape_class=ListTape):
    """
    Build a tape from text such as "_111_".

    The cursor starts on the first '1' or '0'; an all-blank or empty
    string starts at 0 (an empty string becomes a single blank).
    """
    symbols = [Symbol.parse(char) for char in text]
    position = next(
        (idx for idx, symbol in enumerate(symbols) if symbol is not Symbol.BLANK),
        0,
    )
    if not symbols:
        symbols = [Symbol.BLANK]
    return tape_class(symbols, position)
