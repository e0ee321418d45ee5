"""Script-level parse services."""

from tsqlparser.services.script_parser import parse
from tsqlparser.services.parallel import parse_many, parse_many_async

__all__ = [
    'parse',
    'parse_many',
    'parse_many_async'
]
