from . import rfc1459, ctcp, ident

from .rfc1459 import RFC1459Support
from .ctcp import CTCPSupport
from .ident import IdentSupport

ALL = [ IdentSupport, CTCPSupport, RFC1459Support ]
LITE = [ CTCPSupport, RFC1459Support ]
