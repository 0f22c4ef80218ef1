"""
LoggingHandler module for managing logging operations.
This module handles log file creation and per-run rotation.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional, List, Union

from protonhook.shared.paths import get_protonhook_logs_dir


class LoggingHandler:
    """
    Central logging handler for protonhook.
    - Uses ~/ProtonHook/logs/ as the log directory unless a data dir is given.
    - Rotates the log file once per run, keeping a handful of backups.
    Usage:
        logger = LoggingHandler().setup_logger('protonhook', 'protonhook-cli.log')
    """
    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self.log_dir = get_protonhook_logs_dir(data_dir)
        self.ensure_log_directory()

    def ensure_log_directory(self) -> None:
        """Ensure the log directory exists."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            print(f"Failed to create log directory: {e}")

    def rotate_log_file_per_run(self, log_file_path: Path, backup_count: int = 5):
        """Rotate the log file on every run, keeping up to backup_count backups."""
        if log_file_path.exists():
            # Remove the oldest backup if it exists
            oldest = log_file_path.with_suffix(log_file_path.suffix + f'.{backup_count}')
            if oldest.exists():
                oldest.unlink()
            # Shift backups
            for i in range(backup_count - 1, 0, -1):
                src = log_file_path.with_suffix(log_file_path.suffix + f'.{i}')
                dst = log_file_path.with_suffix(log_file_path.suffix + f'.{i+1}')
                if src.exists():
                    src.rename(dst)
            # Move current log to .1
            log_file_path.rename(log_file_path.with_suffix(log_file_path.suffix + '.1'))

    def rotate_log_for_logger(self, log_file: Optional[str] = None, backup_count: int = 5):
        """
        Rotate the log file before any logging occurs.
        Must be called BEFORE any log is written or file handler is attached.
        """
        file_path = self.log_dir / (log_file if log_file else "protonhook-cli.log")
        try:
            self.rotate_log_file_per_run(file_path, backup_count=backup_count)
        except OSError as e:
            print(f"Failed to rotate log file {file_path}: {e}")

    def setup_logger(self, name: str, log_file: Optional[str] = None) -> logging.Logger:
        """Set up a logger with file and console handlers. Call rotate_log_for_logger before this if you want per-run rotation."""
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )

        # Console handler (ERROR and above only)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.ERROR)
        console_handler.setFormatter(console_formatter)
        if not any(type(h) is logging.StreamHandler for h in logger.handlers):
            logger.addHandler(console_handler)

        if log_file:
            file_path = self.log_dir / log_file
            try:
                file_handler = logging.handlers.RotatingFileHandler(
                    file_path, mode='a', encoding='utf-8', maxBytes=1024*1024, backupCount=5
                )
            except OSError as e:
                print(f"Failed to open log file {file_path}: {e}")
                return logger
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(file_formatter)
            if not any(isinstance(h, logging.handlers.RotatingFileHandler) and getattr(h, 'baseFilename', None) == str(file_path) for h in logger.handlers):
                logger.addHandler(file_handler)

        return logger

    def get_log_files(self) -> List[Path]:
        """Get a list of all log files."""
        return list(self.log_dir.glob("*.log"))
