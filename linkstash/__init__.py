"""Core logic for linkstash: identifiers, mapping store, admin sessions."""

from .identifier import IdentifierGenerator
from .sessions import SessionRegistry
from .access import AccessGate
from .service import LinkService

__version__ = "1.0.0"

__all__ = ["IdentifierGenerator", "SessionRegistry", "AccessGate", "LinkService"]
