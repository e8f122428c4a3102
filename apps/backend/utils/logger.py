import logging
from pythonjsonlogger import jsonlogger
import sys
from datetime import datetime, timezone

LOG_FORMAT = '%(timestamp)s %(level)s %(name)s %(message)s'


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname


def configure_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """
    Route the root logger through a single JSON stdout handler.

    Module loggers created with logging.getLogger(__name__) propagate here,
    so every review run emits one structured line per event.
    """
    root = logging.getLogger()
    root.handlers = []

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(CustomJsonFormatter(LOG_FORMAT))
    root.addHandler(sh)

    if log_file:
        fh = logging.FileHandler(log_file, encoding='utf-8')
        fh.setFormatter(CustomJsonFormatter(LOG_FORMAT))
        root.addHandler(fh)

    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return root


def get_logger(name, level=logging.INFO):
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if not logger.handlers:
        # Stream Handler - Robust against encoding errors on Windows
        if sys.platform == "win32" and hasattr(sys.stdout, 'reconfigure'):
            try:
                sys.stdout.reconfigure(encoding='utf-8', errors='backslashreplace')
            except (OSError, ValueError) as e:
                print(f"Failed to reconfigure stdout: {e}")

        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(CustomJsonFormatter(LOG_FORMAT))
        logger.addHandler(sh)

        logger.setLevel(level)
        logger.propagate = False

    return logger
