"""Live preview bookkeeping."""
from .preview import PreviewManager

__all__ = ["PreviewManager"]
