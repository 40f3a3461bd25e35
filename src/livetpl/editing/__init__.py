"""Interactive input: line editor, key notation and completion providers."""
from .completion import CompleterProvider, as_completion_provider
from .keys import ScriptedInput, parse_keys
from .line_editor import CompletionState, EditorMode, EditorStep, LineEditor

__all__ = [
    "CompleterProvider",
    "CompletionState",
    "EditorMode",
    "EditorStep",
    "LineEditor",
    "ScriptedInput",
    "as_completion_provider",
    "parse_keys",
]
