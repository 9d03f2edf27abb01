import argparse

from rich.console import Console
from rich.table import Table

from simulator.program import load_program
from simulator.tape import Symbol

console = Console()

UNDEFINED = "UNDEF"


def describe_state(program, state):
    """State label with its role, e.g. '3 (final)'."""
    roles = []
    if state == program.initial_state:
        roles.append("initial")
    if state in program.final_states:
        roles.append("final")
    if state in program.error_states:
        roles.append("error")
    return f"{state} ({', '.join(roles)})" if roles else str(state)


def transition_rows(program):
    """One row per state: [label, action on 0, action on 1, action on _]."""
    rows = []
    for state in program.states:
        row = [describe_state(program, state)]
        for symbol in Symbol:
            transition = program.transition_for(state, symbol)
            if transition is None:
                row.append(UNDEFINED)
            else:
                # Compact notation: write symbol, move, next state
                row.append(f"{transition.write}{transition.action.value.upper()}{transition.to_state}")
        rows.append(row)
    return rows


def render_latex(program):
    lines = [r"\begin{array}{c|" + "c" * len(Symbol) + "}"]
    lines.append("State/Symbol & " + " & ".join(f"\\text{{{symbol}}}" for symbol in Symbol) + r" \\ \hline")
    for row in transition_rows(program):
        state = row[0].split(" ")[0]
        lines.append(" & ".join([state] + [r"\text{" + cell + "}" for cell in row[1:]]) + r" \\")
    lines.append(r"\end{array}")
    return "\n".join(lines)


def pretty_print_program(program, latex=False):
    console.print("\n[bold]=== Program ===[/bold]")
    console.print(f"  Initial state: {program.initial_state}")
    console.print(f"  Final states: {sorted(program.final_states)}")
    console.print(f"  Error states: {sorted(program.error_states)}")
    console.print(f"  Transitions: {len(program.transitions)}")

    overlap = program.final_states & program.error_states
    if overlap:
        console.print(f"[yellow]  States {sorted(overlap)} are both final and error, they behave as final.[/yellow]")

    table = Table(title="Transition Table", show_header=True, header_style="bold magenta")
    table.add_column("State", justify="left")
    for symbol in Symbol:
        table.add_column(str(symbol), justify="center")
    for row in transition_rows(program):
        table.add_row(*row)
    console.print(table)

    if latex:
        print("\n=== LaTeX Table ===")
        print(render_latex(program))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Turing Machine Program Inspector")
    parser.add_argument("--program", required=True, help="Path to a .tng program")
    parser.add_argument("--latex", action="store_true", help="Also print the table as a LaTeX array")
    args = parser.parse_args(argv)

    program = load_program(args.program)
    pretty_print_program(program, latex=args.latex)


if __name__ == "__main__":
    main()
