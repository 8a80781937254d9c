import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Iterable, List, Optional

# stdlib level -> channel label
LEVEL_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}


class _RelayHandler(logging.Handler):
    """Forwards records of the reader/renderer loggers into a PipelineLogger."""

    def __init__(self, pipeline: "PipelineLogger"):
        super().__init__(level=logging.DEBUG)
        self.pipeline = pipeline

    def emit(self, record: logging.LogRecord):
        try:
            msg = record.getMessage()
        except (TypeError, ValueError):
            msg = str(record.msg)
        self.pipeline.relay(record.levelno, msg, module=record.name)


class PipelineLogger:
    """
    Utility that keeps two log channels:
    - user_log: always-on, records progress, warnings and report lines.
    - debug_log: optional, only created/emitted when enable_debug is True.

    Each run stores logs under {log_root}/ as {doc_basename}.user.log and
    {doc_basename}.debug.log; log_root defaults to ./logs beside the input.
    """

    def __init__(
        self,
        source_path: str,
        log_root: Optional[str] = None,
        enable_debug: bool = False,
        console_echo: bool = True,
    ):
        source = Path(source_path)
        doc_name = source.stem or "document"
        timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
        self.run_dir = Path(log_root or (source.parent / "logs"))
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.user_log_path = self.run_dir / f"{doc_name}.user.log"
        self.debug_log_path = self.run_dir / f"{doc_name}.debug.log"

        self.enable_debug = enable_debug
        self.console_echo = console_echo
        self.counts: Dict[str, int] = {"INFO": 0, "WARN": 0, "ERROR": 0, "DEBUG": 0}

        self._user_logger = self._create_logger(
            f"user.{doc_name}.{timestamp}", self.user_log_path, logging.INFO
        )
        self._debug_logger = None
        if enable_debug:
            self._debug_logger = self._create_logger(
                f"debug.{doc_name}.{timestamp}", self.debug_log_path, logging.DEBUG
            )
        self._captured: List[logging.Logger] = []
        self._saved_levels: Dict[str, int] = {}
        self._relay_handler = _RelayHandler(self)

    def _create_logger(self, name: str, path: Path, level: int) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        handler = logging.FileHandler(path, mode="w", encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.handlers.clear()
        logger.addHandler(handler)
        return logger

    def _timestamp(self) -> str:
        return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")

    def _format_line(self, module: str, level: str, message: str) -> str:
        return f"[{self._timestamp()}][{module}][{level}] {message}"

    def _emit_user(self, module: str, level: str, message: str):
        self.counts[level] = self.counts.get(level, 0) + 1
        line = self._format_line(module, level, message)
        self._user_logger.info(line)
        if self.console_echo:
            print(line)

    def _emit_debug(self, module: str, level: str, message: str):
        if not self.enable_debug or not self._debug_logger:
            return
        line = self._format_line(module, level, message)
        self._debug_logger.debug(line)

    def user(self, message: str, module: str = "CLI"):
        """High-level info that is always recorded."""
        self._emit_user(module, "INFO", message)

    def warn(self, message: str, module: str = "CLI"):
        self._emit_user(module, "WARN", message)

    def error(self, message: str, module: str = "CLI"):
        self._emit_user(module, "ERROR", message)

    def debug(self, message: str, module: str = "CLI"):
        self.counts["DEBUG"] += 1
        self._emit_debug(module, "DEBUG", message)

    def relay(self, levelno: int, message: str, module: str):
        """
        Route a stdlib record: DEBUG/INFO go to the debug channel only,
        WARN/ERROR reach the user log too.
        """
        level = LEVEL_LABELS.get(levelno, "INFO")
        if levelno < logging.WARNING:
            self.counts[level] = self.counts.get(level, 0) + 1
            self._emit_debug(module, level, message)
            return
        self._emit_user(module, level, message)
        self._emit_debug(module, level, message)

    def capture(self, logger_names: Iterable[str]):
        """Attach the relay handler to the named stdlib loggers."""
        for name in logger_names:
            target = logging.getLogger(name)
            if self._relay_handler not in target.handlers:
                target.addHandler(self._relay_handler)
            self._saved_levels.setdefault(name, target.level)
            if self.enable_debug:
                target.setLevel(logging.DEBUG)
            self._captured.append(target)

    def release(self):
        for target in self._captured:
            target.removeHandler(self._relay_handler)
            target.setLevel(self._saved_levels.get(target.name, logging.NOTSET))
        self._captured = []
        self._saved_levels = {}
        for logger in (self._user_logger, self._debug_logger):
            if logger is None:
                continue
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def summarize(self, heading: str, details: str):
        """Helper to write a section header + details into user log."""
        self.user(f"{heading}: {details}")

    def describe_paths(self):
        self.user(f"user={self.user_log_path}")
        if self.enable_debug:
            self.user(f"debug={self.debug_log_path}")
