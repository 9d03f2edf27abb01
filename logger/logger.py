import json
import os
from datetime import datetime, timezone

class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="turing_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def _stamp(self, entry):
        return {"logged_at": datetime.now(timezone.utc).isoformat(), **entry}

    def log(self, entry: dict):
        """Log a single run to the main log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(self._stamp(entry)) + "\n")

    def log_batch(self, entries: list):
        """Log a batch of runs to the main log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(self._stamp(entry)) + "\n")

    def rotate(self):
        """Start a new main log file if the UTC date changed."""
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def log_run(self, entry: dict):
        """Log to the main log and to the accepted/rejected split file."""
        self.log(entry)
        if entry.get("status") == "accepted":
            self.log_accepted([entry])
        else:
            self.log_rejected([entry])

    def log_accepted(self, entries: list):
        """Log runs that halted in a final state."""
        filename = f"accepted_{self.today}.jsonl"
        self._log_to_file(filename, [self._stamp(e) for e in entries])

    def log_rejected(self, entries: list):
        """Log runs that hit an error state or undefined behaviour."""
        filename = f"rejected_{self.today}.jsonl"
        self._log_to_file(filename, [self._stamp(e) for e in entries])
