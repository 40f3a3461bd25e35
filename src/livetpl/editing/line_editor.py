"""Single-line input editor driven one key press at a time.

`LineEditor.feed` performs exactly one transition and returns an
`EditorStep`; `LineEditor.run` pulls key presses from an input source until
the user accepts (Enter, Ctrl-J) or aborts (Escape).

Key map:

    <chars>, bracketed paste    insert at cursor
    Backspace / Delete          delete before / at cursor
    Left / Right                move one character
    Home, Ctrl-B / End, Ctrl-E  start / end of input
    Shift-Left, Ctrl-Left       start of previous word
    Shift-Right, Ctrl-Right     just past next word
    Ctrl-W / Ctrl-U             delete previous word / to start
    Tab, Down / Shift-Tab, Up   cycle completions forward / backward
    Enter, Ctrl-J, Ctrl-M       accept
    Escape                      abort

Anything else (mouse, scroll, function keys, ...) is consumed silently.
Words are whitespace-delimited runs located with prompt_toolkit's `Document`,
which works on character indices.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from prompt_toolkit.document import Document
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys

from livetpl.core.interfaces.completion import CompletionProvider
from livetpl.core.interfaces.input import InputSourceProtocol
from livetpl.errors import CompletionProviderError
from livetpl.logging.helpers import get_logger

# Called after every transition; a truthy return accepts the input.
KeyCallback = Callable[[str, KeyPress], Any]


class EditorMode(enum.Enum):
    EDITING = 'editing'
    COMPLETING = 'completing'
    ACCEPTED = 'accepted'
    ABORTED = 'aborted'


@dataclass
class CompletionState:
    stub: str
    options: List[str]
    index: int = 0

    def advance(self, step: int) -> str:
        self.index = (self.index + step) % len(self.options)
        return self.options[self.index]


@dataclass(frozen=True)
class EditorStep:
    mode: EditorMode
    buffer: str
    cursor: int
    key: KeyPress


_COMPLETION_STEPS: Dict[Keys, int] = {
    Keys.Tab: 1,
    Keys.Down: 1,
    Keys.BackTab: -1,
    Keys.Up: -1,
}

_TRANSITIONS: Dict[Keys, str] = {
    Keys.Backspace: '_backspace',
    Keys.Delete: '_delete',
    Keys.Left: '_left',
    Keys.Right: '_right',
    Keys.Home: '_home',
    Keys.ControlB: '_home',
    Keys.End: '_end',
    Keys.ControlE: '_end',
    Keys.ShiftLeft: '_word_left',
    Keys.ControlLeft: '_word_left',
    Keys.ShiftRight: '_word_right',
    Keys.ControlRight: '_word_right',
    Keys.ControlW: '_delete_word',
    Keys.ControlU: '_delete_to_start',
    Keys.Enter: '_accept',
    Keys.ControlJ: '_accept',
    Keys.Escape: '_abort',
}


def normalize_key(key: Union[Keys, str]) -> Union[Keys, str]:
    """Return the `Keys` member named by *key*, or *key* itself for characters."""
    if isinstance(key, Keys):
        return key
    try:
        return Keys(key)
    except ValueError:
        return key


class LineEditor:
    """Editable text buffer with cursor, word motions and completion cycling."""

    def __init__(
        self,
        default: str = '',
        *,
        prompt: str = '',
        completion_provider: Optional[CompletionProvider] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.prompt = prompt
        self.buffer = default
        self.cursor = len(default)
        self.mode = EditorMode.EDITING
        self.completion: Optional[CompletionState] = None
        self._provider = completion_provider
        self._log = logger or get_logger('editor')

    @property
    def done(self) -> bool:
        return self.mode in (EditorMode.ACCEPTED, EditorMode.ABORTED)

    @property
    def value(self) -> Optional[str]:
        """Accepted text, or None while editing or after an abort."""
        return self.buffer if self.mode is EditorMode.ACCEPTED else None

    def render(self) -> str:
        return f'{self.prompt}{self.buffer}'

    # ------------------------------------------------------------------ #
    #  Transitions                                                       #
    # ------------------------------------------------------------------ #
    def feed(self, key_press: KeyPress) -> Optional[EditorStep]:
        """Apply one key press. Returns None when the key is ignored."""
        if self.done:
            raise RuntimeError(f'editor already {self.mode.value}')

        key = normalize_key(key_press.key)
        if key is Keys.BracketedPaste:
            self._leave_completion()
            self._insert(key_press.data.replace('\r\n', '\n').replace('\r', '\n'))
        elif not isinstance(key, Keys):
            text = key_press.data or key
            if not text.isprintable():
                return None
            self._leave_completion()
            self._insert(text)
        elif key in _COMPLETION_STEPS:
            if self._provider is not None:
                self._complete(_COMPLETION_STEPS[key])
        elif key in _TRANSITIONS:
            self._leave_completion()
            getattr(self, _TRANSITIONS[key])()
        else:
            return None

        return EditorStep(self.mode, self.buffer, self.cursor, key_press)

    def run(self, source: InputSourceProtocol, on_key: Optional[KeyCallback] = None) -> Optional[str]:
        """Edit until accepted or aborted; return the text or None on abort.

        *on_key* runs after every transition that leaves the editor open.
        A truthy result accepts the current buffer, as Enter would.
        """
        while not self.done:
            key_press = source.next_input_event()
            step = self.feed(key_press)
            if step is None or self.done or on_key is None:
                continue
            if on_key(step.buffer, key_press):
                self._log.debug('input accepted by keystroke callback')
                self.mode = EditorMode.ACCEPTED
        return self.value

    def _insert(self, text: str) -> None:
        self.buffer = self.buffer[:self.cursor] + text + self.buffer[self.cursor:]
        self.cursor += len(text)

    def _backspace(self) -> None:
        if self.cursor == 0:
            return
        self.buffer = self.buffer[:self.cursor - 1] + self.buffer[self.cursor:]
        self.cursor -= 1

    def _delete(self) -> None:
        if self.cursor >= len(self.buffer):
            return
        self.buffer = self.buffer[:self.cursor] + self.buffer[self.cursor + 1:]

    def _left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def _right(self) -> None:
        self.cursor = min(len(self.buffer), self.cursor + 1)

    def _home(self) -> None:
        self.cursor = 0

    def _end(self) -> None:
        self.cursor = len(self.buffer)

    def word_left_target(self) -> int:
        rel = Document(self.buffer, self.cursor).find_previous_word_beginning(WORD=True)
        return self.cursor + rel if rel is not None else 0

    def word_right_target(self) -> int:
        rel = Document(self.buffer, self.cursor).find_next_word_ending(include_current_position=True, WORD=True)
        return self.cursor + rel if rel is not None else len(self.buffer)

    def _word_left(self) -> None:
        self.cursor = self.word_left_target()

    def _word_right(self) -> None:
        self.cursor = self.word_right_target()

    def _delete_word(self) -> None:
        target = self.word_left_target()
        self.buffer = self.buffer[:target] + self.buffer[self.cursor:]
        self.cursor = target

    def _delete_to_start(self) -> None:
        self.buffer = self.buffer[self.cursor:]
        self.cursor = 0

    def _accept(self) -> None:
        self.mode = EditorMode.ACCEPTED

    def _abort(self) -> None:
        self.mode = EditorMode.ABORTED

    # ------------------------------------------------------------------ #
    #  Completion                                                        #
    # ------------------------------------------------------------------ #
    def _complete(self, step: int) -> None:
        if self.completion is None:
            stub = self.buffer
            try:
                results = self._provider(stub, self.buffer, self.cursor) or []
            except Exception as exc:  # noqa: BLE001
                raise CompletionProviderError(f'completion provider failed for {stub!r}: {exc}') from exc
            options = [stub, *(str(r) for r in results)]
            self._log.debug('completion started for %r with %d option(s)', stub, len(options) - 1)
            self.completion = CompletionState(stub=stub, options=options)
            self.mode = EditorMode.COMPLETING
        self.buffer = self.completion.advance(step)
        self.cursor = len(self.buffer)

    def _leave_completion(self) -> None:
        if self.completion is not None:
            self.completion = None
            self.mode = EditorMode.EDITING
