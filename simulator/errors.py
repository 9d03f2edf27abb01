from enum import Enum


class ProgramErrorKind(Enum):
    MISSING_FROM = "transition is missing a from state"
    MISSING_TO = "transition is missing a to state"
    MISSING_CONDITION = "transition is missing a condition"
    MISSING_WRITE = "transition is missing a write segment"
    MISSING_ACTION = "transition is missing a movement action"
    INVALID_STATE = "state is not a non-negative integer"
    INVALID_SEGMENT = "segment is not '1', '0', '_' or ' '"
    INVALID_ACTION = "action is not 'r', 'l' or 'n' (upper- or lowercase), '_', ' ' or empty"
    MISSING_INITIAL_STATE = "program has no initial state"


class InvalidProgram(ValueError):
    """Raised when program text (or tape text) cannot be parsed."""

    def __init__(self, kind, line_number=None, line=None):
        self.kind = kind
        self.line_number = line_number
        self.line = line
        message = kind.value
        if line_number is not None:
            message = f"line {line_number}: {message} ({line!r})"
        super().__init__(message)

    def at_line(self, line_number, line):
        """Copy of this error pinned to a program line."""
        return InvalidProgram(self.kind, line_number, line)


class ExecutionError(RuntimeError):
    """Base class for errors that stop a running machine."""


class UndefinedBehavior(ExecutionError):
    def __init__(self, state, symbol):
        self.state = state
        self.symbol = symbol
        super().__init__(f"no transition defined for state {state} reading '{symbol}'")


class ReachedError(ExecutionError):
    def __init__(self, state):
        self.state = state
        super().__init__(f"reached error state {state}")
