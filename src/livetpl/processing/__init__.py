"""Public API surface for livetpl.processing."""
__all__ = [
    "matcher",
    "occurrences",
    "variables",
]
