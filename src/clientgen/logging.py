"""Logging for clientgen: command invocation log and library loggers."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Log file location (next to clientgen.json, never inside the output directory)
LOGS_DIR = ".clientgen-logs"
COMMAND_LOG_FILE = "commands.log"
MAX_LOG_SIZE_MB = 10

_LOGGER_NAME = "clientgen"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger under the clientgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the clientgen logger.

    Args:
        verbose: Emit debug notices (dangling base types, unresolved generics).

    Returns:
        The configured root clientgen logger.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[clientgen] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


def get_logs_path(base_path: Optional[Path] = None) -> Path:
    """Get the .clientgen-logs directory path.

    Args:
        base_path: Base path for logs. Defaults to cwd.

    Returns:
        Path to .clientgen-logs directory.
    """
    if base_path is None:
        base_path = Path.cwd()
    return base_path / LOGS_DIR


def is_logging_enabled(base_path: Optional[Path] = None) -> bool:
    """Check if command logging is enabled via clientgen.json."""
    from .config import ConfigError, load_config

    try:
        return load_config(base_path).command_logging
    except (ConfigError, OSError):
        return True


def log_command(command: str, args: list[str], base_path: Optional[Path] = None) -> None:
    """Log a command invocation.

    Args:
        command: The command name (e.g., "config show").
        args: Command arguments.
        base_path: Base path. Defaults to cwd.
    """
    if not is_logging_enabled(base_path):
        return

    logs_path = get_logs_path(base_path)
    log_file = logs_path / COMMAND_LOG_FILE
    logs_path.mkdir(parents=True, exist_ok=True)

    # Simple size-based rotation, keeping one backup
    if log_file.exists():
        size_mb = log_file.stat().st_size / (1024 * 1024)
        if size_mb > MAX_LOG_SIZE_MB:
            backup = logs_path / f"{COMMAND_LOG_FILE}.1"
            if backup.exists():
                backup.unlink()
            log_file.rename(backup)

    timestamp = datetime.now().isoformat()
    args_str = " ".join(f'"{a}"' if " " in a else a for a in args)
    entry = f"{timestamp} | {command} | {args_str}\n"

    with log_file.open("a") as f:
        f.write(entry)


def log_from_cli(argv: Optional[list[str]] = None, base_path: Optional[Path] = None) -> None:
    """Log the current CLI invocation.

    The command name is the leading run of non-option words, at most two
    (e.g. "config show"); everything after it is recorded as arguments.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return

    command_parts: list[str] = []
    remaining_args: list[str] = []
    for arg in args:
        if len(command_parts) < 2 and not remaining_args and not arg.startswith("-"):
            command_parts.append(arg)
        else:
            remaining_args.append(arg)

    # Single-word commands take positional arguments ("generate models.py")
    if len(command_parts) == 2 and command_parts[0] not in ("config", "logs"):
        remaining_args.insert(0, command_parts.pop())

    command = " ".join(command_parts) if command_parts else "unknown"
    log_command(command, remaining_args, base_path)


def parse_log_file(base_path: Optional[Path] = None) -> list[dict]:
    """Parse the command log file into structured entries.

    Returns:
        List of dicts with keys: timestamp, command, args.
    """
    log_file = get_logs_path(base_path) / COMMAND_LOG_FILE
    if not log_file.exists():
        return []

    entries = []
    with log_file.open("r") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            parts = line.split(" | ", 2)
            if len(parts) >= 2:
                entries.append({
                    "timestamp": parts[0],
                    "command": parts[1],
                    "args": parts[2] if len(parts) > 2 else "",
                })
    return entries
