"""
Logger setup for the pricing tool entry points.
"""
import logging
import sys


def setup_logging(log_level: str = 'INFO') -> logging.Logger:
    """
    Configure root logging to stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        The package logger
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    return logging.getLogger('cabinet_pricing')
