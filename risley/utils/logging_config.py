import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - [%(levelname)s] - %(message)s'

def setup_logging(level=logging.INFO):
    """
    Configures basic logging for the simulator.

    Args:
        level: The logging level (e.g., logging.INFO, logging.DEBUG).
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)

def get_logger(name: str) -> logging.Logger:
    """Logger for a module, typically called with __name__."""
    return logging.getLogger(name)
