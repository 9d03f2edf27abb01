from simulator.errors import ReachedError, UndefinedBehavior
from simulator.program import Move


class TuringMachine:
    """Runs programs against a single tape it owns."""

    def __init__(self, tape):
        self.tape = tape
        self.steps = 0

    def step(self, program, state):
        """Apply the transition for (state, current symbol) and return the next state."""
        symbol = self.tape.read()
        transition = program.transition_for(state, symbol)
        if transition is None:
            raise UndefinedBehavior(state, symbol)

        self.tape.write(transition.write)
        if transition.action is Move.LEFT:
            self.tape.move_left()
        elif transition.action is Move.RIGHT:
            self.tape.move_right()

        self.steps += 1
        return transition.to_state

    def execute(self, program):
        """
        Run a program until it reaches a final state and return that state.

        Raises UndefinedBehavior when no transition matches and ReachedError
        when an error state is entered. Final states win over error states.
        There is no step limit, a program that never halts never returns.
        """
        state = program.initial_state

        while True:
            state = self.step(program, state)

            if state in program.final_states:
                return state

            if state in program.error_states:
                raise ReachedError(state)
