from . import protocol, parsing
from .client import RFC1459Support
from .parsing import RFC1459Message, parse_line
