# tools/run_batch.py

import argparse
import json
import os
from pathlib import Path

from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from simulator.errors import InvalidProgram
from simulator.evaluator import evaluate
from simulator.program import load_program
from simulator.tape import TAPE_BACKENDS

# === Utility Loaders ===
def load_tapes(tapes_file):
    """One tape per line; blank lines are skipped but keep their line index."""
    with open(tapes_file, "r", encoding="utf-8") as f:
        return [(idx, line.rstrip("\r\n")) for idx, line in enumerate(f) if line.strip("\r\n")]

def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []

def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)

def console_message(msg):
    print(f"[{Path(os.getcwd()).name}] {msg}")

def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number

# === Main Batch Runner ===
def run_batch(program_file, tapes_file, output_name="results", batch_size=256, backend="list", results_root="results"):
    """
    Run a program over every tape in tapes_file.

    Results go to <results_root>/<tapes stem>/<output_name>.jsonl and the
    completed line indices to <output_name>_checkpoint.json, so a rerun
    only processes the remaining tapes. A tape that never halts blocks
    the batch.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    program = load_program(program_file)
    tape_class = TAPE_BACKENDS[backend]

    results_folder = Path(results_root) / Path(tapes_file).stem
    results_folder.mkdir(parents=True, exist_ok=True)
    results_file = results_folder / f"{output_name}.jsonl"
    checkpoint_file = results_folder / f"{output_name}_checkpoint.json"

    all_tapes = load_tapes(tapes_file)
    completed = load_checkpoint(checkpoint_file)
    done = set(completed)

    pending = [(idx, text) for idx, text in all_tapes if idx not in done]
    console_message(f"Loaded {len(all_tapes):,} tapes. {len(pending):,} pending.")

    summary = {"accepted": 0, "error_state": 0, "undefined": 0, "invalid": 0}

    with open(results_file, "a", encoding="utf-8") as results_fh:
        for batch_start in range(0, len(pending), batch_size):
            batch = pending[batch_start:batch_start + batch_size]
            console_message(f"Processing batch {batch_start // batch_size + 1} with {len(batch):,} tapes...")

            with Progress(
                    SpinnerColumn(),
                    BarColumn(),
                    "[progress.percentage]{task.percentage:>3.0f}%",
                    TextColumn("{task.completed}/{task.total} Tapes"),
                    TimeElapsedColumn()
            ) as progress:

                task = progress.add_task("[cyan]Running...", total=len(batch))

                batch_results = []

                for idx, tape_text in batch:
                    try:
                        entry = evaluate(program, tape_text, tape_class)
                    except InvalidProgram as e:
                        console_message(f"[WARNING] Tape on line {idx + 1} is invalid: {e}")
                        entry = {"tape_in": tape_text, "status": "invalid", "error": str(e)}

                    entry["line"] = idx + 1
                    batch_results.append(entry)
                    summary[entry["status"]] += 1
                    completed.append(idx)

                    progress.update(task, advance=1)

                # === BULK WRITE once per batch ===
                for entry in batch_results:
                    results_fh.write(json.dumps(entry) + "\n")
                results_fh.flush()

                save_checkpoint(completed, checkpoint_file)
                console_message("[INFO] Batch completed. Checkpoint saved.")

    console_message(f"[SUCCESS] All tapes processed. Results saved to {results_file}.")
    return summary


# === CLI ===
def main(argv=None):
    parser = argparse.ArgumentParser(description="Run a Turing machine program over a file of tapes with checkpointing.")
    parser.add_argument("--program", required=True, help="Path to a .tng program")
    parser.add_argument("--tapes", required=True, help="Path to a tapes file (one tape per line)")
    parser.add_argument("--output", default="results", help="Output result file name (default: results)")
    parser.add_argument("--batch_size", type=positive_int, default=256, help="Batch size per save/checkpoint")
    parser.add_argument("--backend", choices=sorted(TAPE_BACKENDS), default="list", help="Tape backend")
    parser.add_argument("--results_dir", default="results", help="Root folder for results")
    args = parser.parse_args(argv)

    run_batch(
        args.program,
        args.tapes,
        args.output,
        batch_size=args.batch_size,
        backend=args.backend,
        results_root=args.results_dir
    )

if __name__ == "__main__":
    main()
