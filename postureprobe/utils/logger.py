"""
PostureProbe Logging System
Singleton logger with UTF-8 support. Console output goes to stderr so that
stdout only ever carries the JSON report.
"""
import logging
import sys
from typing import Optional


class Logger:
    """Singleton logger with console (stderr) and optional file output."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialize_logger()
        return cls._instance

    def _initialize_logger(self) -> None:
        """Configure logger with a stderr console handler."""
        self.logger = logging.getLogger("postureprobe")
        self.logger.setLevel(logging.WARNING)
        self.logger.propagate = False

        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        self.formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if sys.platform == "win32":
            try:
                sys.stderr.reconfigure(encoding='utf-8')
            except Exception:
                pass

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(self.formatter)
        self.logger.addHandler(console_handler)

    def configure(self, level: str = "WARNING", log_file: Optional[str] = None) -> None:
        """Apply level and file settings loaded from Config."""
        self.logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))

        if not log_file:
            return
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(self.formatter)
            self.logger.addHandler(file_handler)
        except PermissionError:
            pass

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def success(self, msg: str) -> None:
        self.logger.info(f"[SUCCESS] {msg}")
