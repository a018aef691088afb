"""
Minimal logging context for absopds.
Single place to control all output: screen + optional file, with flush.
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.text import Text

_PREFIX_STYLES = {
    "[WARNING] ": "yellow",
    "[ERROR] ": "red",
    "[INFO] ": "cyan",
}
_MAX_PAYLOAD_CHARS = 2000


class AbsOpdsLogger:
    """Minimal logger: print to screen + file, always flush"""

    def __init__(self, log_file: Optional[Path] = None, debug: bool = False):
        self.log_file = log_file
        self._file_handle = None
        self._start_time = datetime.now()
        self._console = Console(highlight=False)
        self.debug_mode = debug

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(log_file, "a", buffering=1, encoding="utf-8")

        from absopds.__version__ import __version__

        self.log(f"({self._start_time.strftime('%H:%M:%S')}  Started absopds {__version__})")

    def log(self, msg: str, prefix: str = ""):
        """Log to screen and file"""
        output = f"{prefix}{msg}" if prefix else msg
        self._console.print(self._screen_text(output, prefix))

        if self._file_handle:
            self._file_handle.write(output + "\n")
            self._file_handle.flush()

    @staticmethod
    def _screen_text(output: str, prefix: str = "") -> Text:
        # Text (not markup) keeps literal brackets in catalog values intact.
        text = Text(output)
        style = _PREFIX_STYLES.get(prefix)
        if style:
            text.stylize(style, 0, len(prefix.rstrip()))
        return text

    def info(self, msg: str):
        self.log(msg, "[INFO] ")

    def warning(self, msg: str):
        self.log(msg, "[WARNING] ")

    def error(self, msg: str):
        self.log(msg, "[ERROR] ")

    def debug(self, msg: str):
        """Debug message (only shown in debug mode)"""
        if self.debug_mode:
            timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
            self.log(msg, f"[{timestamp}] [DEBUG] ")

    def request(self, method: str, path: str, status: int, elapsed_ms: float):
        """Log one served HTTP request (debug mode only)"""
        self.debug(f"{method} {path} -> {status} ({elapsed_ms:.0f}ms)")

    def api_request(self, method: str, url: str, params: Optional[dict] = None):
        """Log upstream API request (debug mode only)"""
        if not self.debug_mode:
            return
        self.debug(f"API Request: {method} {url}")
        if params:
            self.debug(f"  Params: {json.dumps(params, sort_keys=True)}")

    def api_response(self, status: int, data: Any, elapsed_ms: float):
        """Log upstream API response (debug mode only)"""
        if not self.debug_mode:
            return
        self.debug(f"API Response ({elapsed_ms:.0f}ms): Status {status}")
        if data:
            data_str = json.dumps(data, default=str)
            if len(data_str) > _MAX_PAYLOAD_CHARS:
                data_str = data_str[:_MAX_PAYLOAD_CHARS] + " ... (truncated)"
            self.debug(f"  Data: {data_str}")

    def api_retry(self, service: str, attempt: int, max_attempts: int, delay: float):
        self.warning(
            f"{service} request failed. Retrying in {delay:g}s... (attempt {attempt}/{max_attempts})"
        )

    def api_failed(self, service: str, max_attempts: int):
        self.error(f"{service} not responding after {max_attempts} attempts. Aborting.")

    def close(self):
        """Close file handle with goodbye message"""
        if self._file_handle:
            end_time = datetime.now()
            elapsed = end_time - self._start_time
            self.log(
                f"({end_time.strftime('%H:%M:%S')}  Ended session, elapsed {elapsed.total_seconds():.1f}s)"
            )
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


_logger: Optional[AbsOpdsLogger] = None


def set_logger(logger: AbsOpdsLogger):
    """Set global logger instance"""
    global _logger
    _logger = logger


def get_logger() -> AbsOpdsLogger:
    """Get global logger instance"""
    global _logger
    if _logger is None:
        # Fallback: screen-only logger
        _logger = AbsOpdsLogger()
    return _logger


def log(msg: str):
    get_logger().log(msg)


def info(msg: str):
    get_logger().info(msg)


def warning(msg: str):
    get_logger().warning(msg)


def error(msg: str):
    get_logger().error(msg)


def debug(msg: str):
    get_logger().debug(msg)
