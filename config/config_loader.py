import json
import os
from datetime import datetime

from simulator.tape import TAPE_BACKENDS

DEFAULT_CONFIG_PATH = "config/runtime_config.json"

DEFAULT_CONFIG = {
    "tape_backend": "list",
    "log_runs": True,
    "output_directory": "logs/",
    "log_file_prefix": "turing_",
    "results_directory": "results/",
    "batch_size": 256
}

# Expected types for validation
CONFIG_SCHEMA = {
    "tape_backend": str,
    "log_runs": bool,
    "output_directory": str,
    "log_file_prefix": str,
    "results_directory": str,
    "batch_size": int
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass, don't let True pass as a batch size
        if not isinstance(config[key], expected_type) or (expected_type is int and isinstance(config[key], bool)):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    if config["tape_backend"] not in TAPE_BACKENDS:
        raise ValueError(f"Unknown tape backend '{config['tape_backend']}', expected one of {sorted(TAPE_BACKENDS)}.")
    if config["batch_size"] < 1:
        raise ValueError("batch_size must be at least 1.")

def load_config(path=None, verbose=False):
    """
    Load the runtime config, merging it over DEFAULT_CONFIG.

    With no path the defaults are used as-is. An explicit path that does
    not exist raises FileNotFoundError.
    """
    config = DEFAULT_CONFIG.copy()

    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found at: {path}")

        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        # Merge defaults with overrides
        config.update(user_config)

    # Validate schema
    validate_config(config)

    # Validate output directory
    if config["log_runs"]:
        os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config

def save_config(config, path=DEFAULT_CONFIG_PATH):
    validate_config(config)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
