from simulator.errors import ReachedError, UndefinedBehavior
from simulator.tape import ListTape, parse_tape
from simulator.turing_machine import TuringMachine


def evaluate(program, tape_text, tape_class=ListTape):
    """
    Run one program on one tape and summarise the outcome.

    Returns a JSON-serializable entry:
        tape_in, tape_out, status ("accepted", "error_state" or "undefined"),
        final_state, steps, error
    Invalid tape text raises InvalidProgram.
    """
    machine = TuringMachine(parse_tape(tape_text, tape_class))

    entry = {
        "tape_in": tape_text,
        "status": "accepted",
        "final_state": None,
        "error": None,
    }

    try:
        entry["final_state"] = machine.execute(program)
    except ReachedError as e:
        entry["status"] = "error_state"
        entry["final_state"] = e.state
        entry["error"] = str(e)
    except UndefinedBehavior as e:
        entry["status"] = "undefined"
        entry["final_state"] = e.state
        entry["error"] = str(e)

    entry["tape_out"] = str(machine.tape)
    entry["steps"] = machine.steps
    return entry
