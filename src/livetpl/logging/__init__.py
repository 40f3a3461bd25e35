from livetpl.logging.factory import DefaultLoggerFactory
from livetpl.logging.helpers import JsonLogFormatter, configure_logging, get_logger, parse_level, trace_offsets

__all__ = [
    'DefaultLoggerFactory',
    'JsonLogFormatter',
    'configure_logging',
    'get_logger',
    'parse_level',
    'trace_offsets',
]
