import sys
import os

LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


class SimulationLogger:
    """
    Logger for simulation runs, logs both on console and to a file, centralizing the logging.
    Messages below the configured level (LOG_LEVEL environment variable by default) are dropped.
    """

    def __init__(self, log_filename: str = None, level: str = None):
        """
        Initialize the logger and open the log file, given the full path.
        Without a file name the logger only writes on the console.
        """
        self.level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        self.log_file_path = log_filename
        self.log_file = None

        if log_filename is None:
            return

        log_dir = os.path.dirname(log_filename)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        try:
            self.log_file = open(log_filename, 'w', buffering=1)
            self.debug(f"--- Log file initialized at: {log_filename} ---")
        except OSError as e:
            self._console(f"CRITICAL: Cannot open log file {log_filename}: {e}", sys.stderr)

    @staticmethod
    def _console(message: str, stream=None):
        (stream or sys.stdout).write(message + "\n")

    def is_enabled(self, level: str) -> bool:
        return LOG_LEVELS.get(level, 20) >= LOG_LEVELS.get(self.level, 20)

    def log(self, message: str, level: str = "INFO"):
        """Log message to both console and log file"""
        if not self.is_enabled(level):
            return
        self._console(message, sys.stderr if level == "ERROR" else None)
        if self.log_file:
            try:
                self.log_file.write(message + "\n")
            except OSError as e:
                self._console(f"CRITICAL: Failed to write to log file: {e}", sys.stderr)

    def debug(self, message: str):
        self.log(message, level="DEBUG")

    def error(self, message: str):
        self.log(message, level="ERROR")

    def close(self):
        """Flush and close the log file"""
        if self.log_file:
            try:
                self.debug(f"--- Closing log file: {self.log_file_path} ---")
                self.log_file.close()
            except OSError as e:
                self._console(f"Failed to close log file: {e}", sys.stderr)
            finally:
                self.log_file = None  # set the file to None anyway

    def __enter__(self) -> "SimulationLogger":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
