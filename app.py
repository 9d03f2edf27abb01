# app.py

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, IntPrompt, Confirm

from config.config_loader import DEFAULT_CONFIG_PATH, load_config, save_config
from logger.logger import JSONLogger
from simulator.errors import InvalidProgram
from simulator.evaluator import evaluate
from simulator.program import load_program
from simulator.tape import TAPE_BACKENDS
from tools.program_inspect import pretty_print_program
from tools.run_batch import run_batch

console = Console()

# Process exit codes
EXIT_ACCEPTED = 0
EXIT_INVALID = 1
EXIT_EXECUTION_ERROR = 2
EXIT_MISSING_FILE = 3

# === Utilities ===
def run_program(program_path, tape_text, config, backend=None):
    """Parse, run and report one program. Returns the process exit code."""
    try:
        program = load_program(program_path)
    except FileNotFoundError:
        console.print(f"[red]Error: program file {escape(str(program_path))} not found![/red]")
        return EXIT_MISSING_FILE
    except InvalidProgram as e:
        console.print(f"[red]Invalid program {escape(str(program_path))}: {escape(str(e))}[/red]")
        return EXIT_INVALID

    tape_class = TAPE_BACKENDS[backend or config["tape_backend"]]
    try:
        entry = evaluate(program, tape_text, tape_class)
    except InvalidProgram as e:
        console.print(f"[red]Invalid tape {escape(repr(tape_text))}: {escape(str(e))}[/red]")
        return EXIT_INVALID

    entry["program"] = str(program_path)
    if config["log_runs"]:
        JSONLogger(config["output_directory"], config["log_file_prefix"]).log_run(entry)

    if entry["status"] == "accepted":
        console.print(f"[green]Halted in final state {entry['final_state']} after {entry['steps']:,} steps.[/green]")
        console.print(f"Tape: {entry['tape_out']}")
        return EXIT_ACCEPTED

    console.print(f"[red]Execution failed after {entry['steps']:,} steps: {escape(entry['error'])}[/red]")
    console.print(f"Tape: {entry['tape_out']}")
    return EXIT_EXECUTION_ERROR

def show_main_menu():
    console.print("\n[bold cyan]Turing Machine Interpreter[/bold cyan]")
    console.print("[1] Run a Program")
    console.print("[2] Inspect a Program")
    console.print("[3] Run a Tape Batch")
    console.print("[4] Edit Config")
    console.print("[5] Exit")

def handle_run(config):
    console.print("\n[bold]Run a Program[/bold]")
    program_path = Prompt.ask("Program file", default="programs/next_integer.tng")
    tape_text = Prompt.ask("Initial tape", default="_111_")
    run_program(program_path, tape_text, config)

def handle_inspect():
    console.print("\n[bold]Inspect a Program[/bold]")
    program_path = Prompt.ask("Program file", default="programs/next_integer.tng")
    latex = Confirm.ask("Print LaTeX table too?", default=False)
    try:
        pretty_print_program(load_program(program_path), latex=latex)
    except FileNotFoundError:
        console.print(f"[red]Program file {escape(str(program_path))} not found![/red]")
    except InvalidProgram as e:
        console.print(f"[red]Invalid program: {escape(str(e))}[/red]")

def handle_batch(config):
    console.print("\n[bold]Run a Tape Batch[/bold]")
    program_path = Prompt.ask("Program file", default="programs/next_integer.tng")
    tapes_path = Prompt.ask("Tapes file (one tape per line)")
    batch_size = IntPrompt.ask("Batch Size", default=config["batch_size"])

    if batch_size < 1:
        console.print("[red]Batch size must be at least 1.[/red]")
        return
    if not Path(tapes_path).exists():
        console.print(f"[red]Tapes file {escape(tapes_path)} not found![/red]")
        return

    try:
        summary = run_batch(
            program_path,
            tapes_path,
            batch_size=batch_size,
            backend=config["tape_backend"],
            results_root=config["results_directory"]
        )
    except FileNotFoundError:
        console.print(f"[red]Program file {escape(str(program_path))} not found![/red]")
        return
    except InvalidProgram as e:
        console.print(f"[red]Invalid program: {escape(str(e))}[/red]")
        return
    console.print(f"[green]Batch completed: {summary}[/green]")

def handle_edit_config(config, config_path):
    console.print("\n[bold]Edit Configuration[/bold]")

    tape_backend = Prompt.ask("Tape Backend", choices=sorted(TAPE_BACKENDS), default=config["tape_backend"])
    log_runs = Confirm.ask("Log runs?", default=config["log_runs"])
    output_directory = Prompt.ask("Log Directory", default=config["output_directory"])
    batch_size = IntPrompt.ask("Batch Size", default=config["batch_size"])
    if batch_size < 1:
        console.print("[red]Batch size must be at least 1. Configuration unchanged.[/red]")
        return

    config.update({
        "tape_backend": tape_backend,
        "log_runs": log_runs,
        "output_directory": output_directory,
        "batch_size": batch_size
    })

    save_config(config, config_path)
    console.print("[green]Configuration updated successfully.[/green]")

def interactive_main(config, config_path):
    while True:
        show_main_menu()
        choice = Prompt.ask("\nChoose an option", choices=["1", "2", "3", "4", "5"], default="5")

        if choice == "1":
            handle_run(config)
        elif choice == "2":
            handle_inspect()
        elif choice == "3":
            handle_batch(config)
        elif choice == "4":
            handle_edit_config(config, config_path)
            config = load_config(config_path)
        elif choice == "5":
            console.print("[bold green]Goodbye![/bold green]")
            break

# === CLI Mode for Automation ===
def cli_main(args, config):
    if args.tape_file:
        try:
            with open(args.tape_file, "r", encoding="utf-8") as f:
                tape_text = f.read().strip("\r\n")
        except FileNotFoundError:
            console.print(f"[red]Error: tape file {escape(args.tape_file)} not found![/red]")
            return EXIT_MISSING_FILE
    else:
        tape_text = args.tape

    return run_program(args.program, tape_text, config, backend=args.backend)

def main(argv=None):
    parser = argparse.ArgumentParser(description="Turing Machine Interpreter")
    parser.add_argument("program", nargs="?", help="Path to a .tng program; omit for the interactive menu")
    parser.add_argument("tape", nargs="?", default="", help="Initial tape, e.g. _111_")
    parser.add_argument("--tape-file", help="Read the initial tape from a file instead")
    parser.add_argument("--backend", choices=sorted(TAPE_BACKENDS), help="Tape backend (overrides config)")
    parser.add_argument("--config", help=f"Runtime config JSON (default: {DEFAULT_CONFIG_PATH} when present)")
    parser.add_argument("--no-log", action="store_true", help="Do not write run logs")
    args = parser.parse_args(argv)

    config_path = args.config
    if config_path is None and Path(DEFAULT_CONFIG_PATH).exists():
        config_path = DEFAULT_CONFIG_PATH

    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_MISSING_FILE
    except (ValueError, TypeError) as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        return EXIT_INVALID

    if args.no_log:
        config["log_runs"] = False

    if args.program:
        return cli_main(args, config)

    interactive_main(config, config_path or DEFAULT_CONFIG_PATH)
    return EXIT_ACCEPTED

if __name__ == "__main__":
    sys.exit(main())
