"""Non-blocking queue-based logging setup."""

import atexit
import logging
import logging.handlers
import queue
import sys

LOG_FILE = "/tmp/extraction_bridge.log"


def setup_logging(level: str = "INFO") -> logging.handlers.QueueListener:
    """Configure non-blocking logging using a queue.

    Backends may shell out (ffprobe) while a request is being served, so log
    I/O is pushed to a listener thread instead of the calling thread.

    Returns the QueueListener so it can be stopped on shutdown.
    """
    is_interactive = sys.stdout.isatty() and sys.stderr.isatty()

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)  # Unlimited size
    queue_handler = logging.handlers.QueueHandler(log_queue)

    # Always log to file
    file_handler = logging.FileHandler(LOG_FILE)
    log_formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    file_handler.setFormatter(log_formatter)

    handlers: list[logging.Handler] = [file_handler]
    if is_interactive:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(log_formatter)
        handlers.append(stream_handler)

    queue_listener = logging.handlers.QueueListener(
        log_queue, *handlers, respect_handler_level=True
    )
    queue_listener.start()

    atexit.register(queue_listener.stop)

    # Configure root logger to use queue handler (non-blocking)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[queue_handler],
    )

    return queue_listener
