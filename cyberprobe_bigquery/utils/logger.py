# Run script in terminal: python3 -m cyberprobe_bigquery.main <input-queue>
# Every module gets its logger from here so the format and log files stay consistent
import logging
import time
import os
import inspect
from dotenv import load_dotenv
from logging.handlers import RotatingFileHandler

# Load environment variables from .env file into memory
load_dotenv("config/.env")

PACKAGE_NAME = "cyberprobe_bigquery"

# Project root (one level above the package directory)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# Creates a logger for a module. Parameter can be equal to None
def get_logger(name=None):
    # When running a file directly, __name__ = "__main__"
    # Detect the real caller module so logs don't all land in __main__.log
    if not name or name == "__main__":
        # returns the function at the specific call stack
        frame = inspect.stack()[1]
        # returns the module where the function ran in the call stack
        module = inspect.getmodule(frame[0])

        if module and module.__name__ != "__main__":
            name = module.__name__
        else:
            # Fallback: derive from relative file path
            name = os.path.splitext(os.path.relpath(frame.filename, start=os.getcwd()))[0]
            name = name.replace(os.sep, ".")  # Convert path -> module style

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    # Derive the log path from the module name
    # cyberprobe_bigquery.load.batch_writer -> logs/load/batch_writer.log
    log_path = name.replace(f"{PACKAGE_NAME}.", "").replace(".", "/")

    log_root = os.getenv("LOG_DIR") or os.path.join(BASE_DIR, "logs")
    log_dir = os.path.join(log_root, os.path.dirname(log_path))

    # One persistent file per module (no timestamp)
    log_file = os.path.join(log_dir, f"{os.path.basename(log_path)}.log")

    # If the logger already exists in memory it is returned, otherwise it is created
    logger = logging.getLogger(name)
    # Filters what will be written in the log files
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    # Prevent log duplication from parent loggers
    logger.propagate = False

    # Prevent duplicate handlers (so logs don't appear twice)
    if not logger.handlers:
        os.makedirs(log_dir, exist_ok=True)

        formatter = logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        formatter.converter = time.gmtime  # force UTC timestamps

        # Writes to logs/<module path>.log and rotates at 5MB
        file_handler = RotatingFileHandler(
            log_file, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # Stream handler: prints logs to the console
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    # return logger object so other modules need no set up
    return logger
