import logging
import sys


class Logger:
    """Configures the root logger once and hands out named loggers."""

    def __init__(self, log_format: str, log_level: str) -> None:
        self.log_format = log_format
        self.log_level = log_level
        self._configure()

    def _configure(self) -> None:
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(self.log_format, datefmt="%Y-%m-%d %H:%M:%S")
        )
        root_logger.addHandler(handler)
        root_logger.setLevel(self.log_level)

        # Keep the SDK transport quiet unless something goes wrong
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("google_genai").setLevel(logging.WARNING)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)
