"""
livetpl.adapters – Concrete implementations of the collaborator Protocols.

Modules
-------
document.py → InMemoryDocument
"""

from .document import InMemoryDocument

__all__ = [
    "InMemoryDocument",
]
