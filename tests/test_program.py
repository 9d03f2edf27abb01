import pytest

from simulator.errors import InvalidProgram, ProgramErrorKind
from simulator.program import Move, Transition, format_program, load_program, parse_program, parse_state
from simulator.tape import Symbol

INCREMENT = """\
# adds one
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


def parse_error(text):
    with pytest.raises(InvalidProgram) as exc:
        parse_program(text)
    return exc.value


def test_parse_increment():
    program = parse_program(INCREMENT)
    assert program.initial_state == 0
    assert program.final_states == {3}
    assert program.error_states == frozenset()
    assert len(program.transitions) == 9

    transition = program.transition_for(1, Symbol.BLANK)
    assert transition == Transition(1, 3, Symbol.BLANK, Symbol.ONE, Move.STAY)
    assert program.transition_for(3, Symbol.ONE) is None


def test_comments_and_blank_lines_skipped():
    program = parse_program("# comment\n/ another\n\n+4\n//x,y\n")
    assert program.initial_state == 4
    assert len(program.transitions) == 0


def test_windows_line_endings():
    program = parse_program("+1\r\n-2\r\n1,2,1,1,r\r\n")
    assert program.initial_state == 1
    assert program.final_states == {2}
    assert program.transition_for(1, Symbol.ONE).action is Move.RIGHT


@pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029"])
def test_only_newline_ends_a_line(separator):
    error = parse_error(f"+0\n0,1,1,1,r{separator}\n")
    assert error.kind is ProgramErrorKind.INVALID_ACTION
    assert error.line_number == 2


def test_separator_does_not_split_transition():
    # Split at the form feed, "0,1" alone would be missing its condition
    error = parse_error("+0\n0,1\x0c1,1,r\n")
    assert error.kind is ProgramErrorKind.MISSING_ACTION
    assert error.line == "0,1\x0c1,1,r"


def test_final_and_error_states():
    program = parse_program("+0\n-1\n-2\n!3\n!4\n")
    assert program.final_states == {1, 2}
    assert program.error_states == {3, 4}


def test_state_both_final_and_error_is_allowed():
    program = parse_program("+0\n-1\n!1\n")
    assert 1 in program.final_states
    assert 1 in program.error_states


def test_later_initial_state_wins():
    program = parse_program("+0\n+7\n")
    assert program.initial_state == 7


def test_later_duplicate_transition_wins():
    program = parse_program("+0\n0,1,1,0,r\n0,2,1,1,l\n")
    assert len(program.transitions) == 1
    assert program.transition_for(0, Symbol.ONE) == Transition(0, 2, Symbol.ONE, Symbol.ONE, Move.LEFT)


def test_missing_initial_state():
    error = parse_error("# only comments\n-1\n0,1,_,_,r\n")
    assert error.kind is ProgramErrorKind.MISSING_INITIAL_STATE
    assert error.line_number is None


@pytest.mark.parametrize("line, kind", [
    ("1", ProgramErrorKind.MISSING_TO),
    ("1,2", ProgramErrorKind.MISSING_CONDITION),
    ("1,2,3", ProgramErrorKind.MISSING_WRITE),
    ("1,2,1,0", ProgramErrorKind.MISSING_ACTION),
    # Missing fields are reported before bad content
    ("x,y", ProgramErrorKind.MISSING_CONDITION),
    (" ", ProgramErrorKind.MISSING_TO),
])
def test_missing_fields(line, kind):
    error = parse_error(f"+0\n{line}\n")
    assert error.kind is kind
    assert error.line_number == 2
    assert error.line == line


@pytest.mark.parametrize("line, kind", [
    ("a,2,1,0,r", ProgramErrorKind.INVALID_STATE),
    ("1,-2,1,0,r", ProgramErrorKind.INVALID_STATE),
    ("1,2,3,0,r", ProgramErrorKind.INVALID_SEGMENT),
    ("1,2,1,x,r", ProgramErrorKind.INVALID_SEGMENT),
    ("1,2,1,0,x", ProgramErrorKind.INVALID_ACTION),
    ("1,2,1,0,r ", ProgramErrorKind.INVALID_ACTION),
    # Fields are checked left to right
    ("x,2,9,0,q", ProgramErrorKind.INVALID_STATE),
    ("1,2,9,0,q", ProgramErrorKind.INVALID_SEGMENT),
])
def test_invalid_fields(line, kind):
    assert parse_error(f"+0\n{line}\n").kind is kind


def test_error_stops_at_first_offending_line():
    error = parse_error("+0\n1,2,3\n+x\n")
    assert error.kind is ProgramErrorKind.MISSING_WRITE
    assert error.line_number == 2
    assert "line 2" in str(error)


@pytest.mark.parametrize("text", ["+", "+x", "+-1", "+ 1", "+1_000", "-a", "!"])
def test_invalid_declared_states(text):
    assert parse_error(f"+0\n{text}\n").kind is ProgramErrorKind.INVALID_STATE


def test_parse_state():
    assert parse_state("0") == 0
    assert parse_state("42") == 42
    assert parse_state("+5") == 5
    with pytest.raises(InvalidProgram):
        parse_state("")
    with pytest.raises(InvalidProgram):
        parse_state("٣")


@pytest.mark.parametrize("token, move", [
    ("r", Move.RIGHT), ("R", Move.RIGHT),
    ("l", Move.LEFT), ("L", Move.LEFT),
    ("n", Move.STAY), ("N", Move.STAY), ("", Move.STAY), ("_", Move.STAY), (" ", Move.STAY),
])
def test_move_tokens(token, move):
    assert Move.parse(token) is move


def test_blank_condition_written_as_space():
    program = parse_program("+0\n0,1, , ,\n")
    assert program.transition_for(0, Symbol.BLANK) == Transition(0, 1, Symbol.BLANK, Symbol.BLANK, Move.STAY)


def test_extra_fields_are_ignored():
    program = parse_program("+0\n0,1,1,0,r,whatever\n")
    assert program.transition_for(0, Symbol.ONE).write is Symbol.ZERO


def test_program_is_read_only():
    program = parse_program(INCREMENT)
    with pytest.raises(TypeError):
        program.transitions[(9, Symbol.ONE)] = None
    with pytest.raises(AttributeError):
        program.initial_state = 5


def test_states_lists_everything():
    program = parse_program("+0\n-5\n!6\n0,1,1,1,r\n")
    assert program.states == [0, 1, 5, 6]


def test_format_program_reparses_to_same_program():
    program = parse_program(INCREMENT)
    text = format_program(program)
    assert text.startswith("+0\n-3\n0,0,0,0,r\n")
    assert parse_program(text) == program


def test_load_program(tmp_path):
    path = tmp_path / "inc.tng"
    path.write_text(INCREMENT, encoding="utf-8")
    assert load_program(path) == parse_program(INCREMENT)
