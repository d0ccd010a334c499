"""
Utility modules for the release build
"""

import copy
import logging
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .artifacts import copy_artifact, format_size, list_artifacts


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'SUCCESS': '\033[92m',  # Bright Green
        'RESET': '\033[0m'
    }

    # Short labels matching the shell-style WARN:/ERROR: prefixes
    LABELS = {
        'WARNING': 'WARN',
    }

    def __init__(self, fmt=None, datefmt=None, use_color: Optional[bool] = None):
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def format(self, record):
        if getattr(record, 'raw', False):
            return record.getMessage()

        # Handlers share records; work on a copy
        record = copy.copy(record)
        levelname = record.levelname
        label = self.LABELS.get(levelname, levelname)

        use_color = self.use_color
        if use_color is None:
            use_color = sys.stdout.isatty()

        if use_color:
            color = self.COLORS.get(levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']
            record.levelname = f"{color}{label}{reset}"
            record.msg = f"{color}{record.msg}{reset}"
        else:
            record.levelname = label

        return super().format(record)


class Logger:
    """Release build logger"""

    SUCCESS = 25  # Between INFO and WARNING

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger

        Args:
            verbose: Enable verbose output
            log_file: Optional log file path
        """
        self.verbose = verbose

        logging.addLevelName(self.SUCCESS, "SUCCESS")

        self.logger = logging.getLogger("release_build")
        self.logger.setLevel(logging.DEBUG if verbose or log_file else logging.INFO)
        self.logger.propagate = False

        # Remove existing handlers
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

        if verbose:
            fmt = "%(asctime)s %(levelname)s: %(message)s"
        else:
            fmt = "%(levelname)s: %(message)s"

        console_handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S"))
        self.logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(ColoredFormatter(
                "%(asctime)s %(levelname)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
                use_color=False,
            ))
            self.logger.addHandler(file_handler)

    def debug(self, msg: str):
        """Log debug message"""
        self.logger.debug(msg)

    def info(self, msg: str):
        """Log info message"""
        self.logger.info(msg)

    def warning(self, msg: str):
        """Log warning message"""
        self.logger.warning(msg)

    def error(self, msg: str):
        """Log error message"""
        self.logger.error(msg)

    def success(self, msg: str):
        """Log success message"""
        self.logger.log(self.SUCCESS, msg)

    def raw(self, msg: str):
        """Log raw message without formatting"""
        record = self.logger.makeRecord(
            self.logger.name, logging.INFO, "", 0, msg, (), None
        )
        record.raw = True
        self.logger.handle(record)

    def step(self, msg: str):
        """Log a pipeline section header"""
        self.raw(f"==> {msg}")


class CommandRunner:
    """Runs external commands with logging and dry-run support"""

    def __init__(self, logger: Logger, dry_run: bool = False):
        self.logger = logger
        self.dry_run = dry_run

    def run(self,
            cmd: List[str],
            cwd: Optional[Path] = None,
            env: Optional[Dict[str, str]] = None,
            capture_output: bool = False) -> subprocess.CompletedProcess:
        """
        Run a command and return its completed process

        Non-zero exits are returned, not raised; a missing executable is
        reported as exit code 127 like a shell would.

        Args:
            cmd: Command and arguments
            cwd: Working directory
            env: Full environment for the child process
            capture_output: Capture stdout/stderr

        Returns:
            CompletedProcess instance
        """
        cmd_str = " ".join(str(c) for c in cmd)
        self.logger.debug(f"Running: {cmd_str}")
        if cwd is not None:
            self.logger.debug(f"  in: {cwd}")

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would run: {cmd_str}")
            return subprocess.CompletedProcess(cmd, 0, "", "")

        try:
            result = subprocess.run(
                [str(c) for c in cmd],
                cwd=cwd,
                env=env,
                check=False,
                capture_output=capture_output,
                text=True
            )
        except FileNotFoundError:
            self.logger.debug(f"Command not found: {cmd[0]}")
            return subprocess.CompletedProcess(cmd, 127, "", "")

        if capture_output and result.stdout:
            self.logger.debug(f"Output: {result.stdout}")
        if result.returncode != 0:
            self.logger.debug(f"Command exited with {result.returncode}: {cmd_str}")

        return result


__all__ = [
    "ColoredFormatter",
    "Logger",
    "CommandRunner",
    "copy_artifact",
    "format_size",
    "list_artifacts",
]
