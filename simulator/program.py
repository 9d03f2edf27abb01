import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from simulator.errors import InvalidProgram, ProgramErrorKind
from simulator.tape import Symbol

# Optional '+' then ASCII digits, matching what the .tng format accepts
_STATE_PATTERN = re.compile(r"\+?[0-9]+")

# Error raised when a transition line stops before field N (from, to, condition, write, action)
MISSING_FIELD_ERRORS = (
    ProgramErrorKind.MISSING_FROM,
    ProgramErrorKind.MISSING_TO,
    ProgramErrorKind.MISSING_CONDITION,
    ProgramErrorKind.MISSING_WRITE,
    ProgramErrorKind.MISSING_ACTION,
)


class Move(Enum):
    LEFT = "l"
    RIGHT = "r"
    STAY = "n"

    @classmethod
    def parse(cls, token):
        if token in ("r", "R"):
            return cls.RIGHT
        if token in ("l", "L"):
            return cls.LEFT
        if token in ("n", "N", "", "_", " "):
            return cls.STAY
        raise InvalidProgram(ProgramErrorKind.INVALID_ACTION)


def parse_state(token):
    """Parse a state number (non-negative integer)."""
    if not _STATE_PATTERN.fullmatch(token):
        raise InvalidProgram(ProgramErrorKind.INVALID_STATE)
    return int(token)


@dataclass(frozen=True)
class Transition:
    """When in `from_state` reading `condition`: write, move, become `to_state`."""

    from_state: int
    to_state: int
    condition: Symbol
    write: Symbol
    action: Move

    @property
    def key(self):
        return (self.from_state, self.condition)

    @classmethod
    def parse(cls, line):
        parts = line.split(",")
        # Every field must be present before any of them is validated
        if len(parts) < len(MISSING_FIELD_ERRORS):
            raise InvalidProgram(MISSING_FIELD_ERRORS[len(parts)])
        from_state, to_state, condition, write, action = parts[:5]

        return cls(
            from_state=parse_state(from_state),
            to_state=parse_state(to_state),
            condition=Symbol.parse(condition),
            write=Symbol.parse(write),
            action=Move.parse(action),
        )

    def to_line(self):
        return f"{self.from_state},{self.to_state},{self.condition},{self.write},{self.action.value}"


@dataclass(frozen=True)
class Program:
    """
    A parsed Turing machine program.

    Program text is line oriented:
        - "#..." or "/..." lines are comments, empty lines are skipped
        - "+N" sets the initial state (exactly one is required, the last wins)
        - "-N" adds a final state, "!N" adds an error state
        - any other line is a transition "from,to,condition,write,action"

    Example (add 1 to a binary number surrounded by blanks):
        +0
        -3
        0,0,0,0,r
        0,0,1,1,r
        0,1,_,_,l
        1,2,0,1,l
        1,1,1,0,l
        1,3,_,1,n
        2,2,0,0,l
        2,2,1,1,l
        2,3,_,_,r
    """

    initial_state: int
    final_states: frozenset
    error_states: frozenset
    transitions: MappingProxyType

    def transition_for(self, state, symbol):
        return self.transitions.get((state, symbol))

    @property
    def states(self):
        """Every state mentioned anywhere in the program, sorted."""
        found = {self.initial_state} | self.final_states | self.error_states
        for transition in self.transitions.values():
            found.add(transition.from_state)
            found.add(transition.to_state)
        return sorted(found)


def parse_program(text):
    """Parse program text, raising InvalidProgram on the first bad line."""
    initial_state = None
    final_states = set()
    error_states = set()
    transitions = {}

    # Only "\n" ends a line; form feeds and other separators stay in the line
    for line_number, line in enumerate(text.split("\n"), start=1):
        if line.endswith("\r"):
            line = line[:-1]
        # Skip comments
        if not line or line.startswith(("#", "/")):
            continue

        try:
            prefix = line[0]
            if prefix == "+":
                initial_state = parse_state(line[1:])
            elif prefix == "-":
                final_states.add(parse_state(line[1:]))
            elif prefix == "!":
                error_states.add(parse_state(line[1:]))
            else:
                transition = Transition.parse(line)
                transitions[transition.key] = transition
        except InvalidProgram as e:
            raise e.at_line(line_number, line) from None

    if initial_state is None:
        raise InvalidProgram(ProgramErrorKind.MISSING_INITIAL_STATE)

    return Program(
        initial_state=initial_state,
        final_states=frozenset(final_states),
        error_states=frozenset(error_states),
        transitions=MappingProxyType(transitions),
    )


def load_program(path):
    with open(path, "r", encoding="utf-8") as f:
        return parse_program(f.read())


def format_program(program):
    """Render a program back to canonical .tng text."""
    lines = [f"+{program.initial_state}"]
    lines += [f"-{state}" for state in sorted(program.final_states)]
    lines += [f"!{state}" for state in sorted(program.error_states)]

    symbol_order = {symbol: idx for idx, symbol in enumerate(Symbol)}
    ordered = sorted(
        program.transitions.values(),
        key=lambda t: (t.from_state, symbol_order[t.condition]),
    )
    lines += [transition.to_line() for transition in ordered]
    return "\n".join(lines) + "\n"
