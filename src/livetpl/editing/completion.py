"""Completion providers for the line editor.

A provider is any callable ``(stub, full_line, cursor_pos) -> Sequence[str]``
returning whole candidate values. `as_completion_provider` also accepts a
prompt_toolkit `Completer` or a static word list, so hosts can reuse the
completers they already have.
"""

from typing import Iterable, List, Optional, Union

from prompt_toolkit.completion import CompleteEvent, Completer, WordCompleter
from prompt_toolkit.document import Document

from livetpl.core.interfaces.completion import CompletionProvider

CompletionSource = Union[None, CompletionProvider, Completer, Iterable[str]]


class CompleterProvider:
    """Adapt a prompt_toolkit Completer to the provider contract.

    Each `Completion` is applied to *full_line* at *cursor_pos* and the
    resulting line becomes a candidate. Duplicates and the stub itself are
    dropped.
    """

    def __init__(self, completer: Completer) -> None:
        self._completer = completer

    def __call__(self, stub: str, full_line: str, cursor_pos: int) -> List[str]:
        doc = Document(full_line, cursor_pos)
        out: List[str] = []
        for c in self._completer.get_completions(doc, CompleteEvent(completion_requested=True)):
            start = max(0, cursor_pos + c.start_position)
            candidate = full_line[:start] + c.text + full_line[cursor_pos:]
            if candidate != stub and candidate not in out:
                out.append(candidate)
        return out


def as_completion_provider(source: CompletionSource) -> Optional[CompletionProvider]:
    """Normalize *source* into a provider, or None when completion is disabled."""
    if source is None:
        return None
    if isinstance(source, Completer):
        return CompleterProvider(source)
    if isinstance(source, str):
        raise TypeError('completion source must be a callable, a Completer or a list of words, not str')
    if callable(source):
        return source  # type: ignore[return-value]
    words = [str(w) for w in source]
    return CompleterProvider(WordCompleter(words, sentence=True))

