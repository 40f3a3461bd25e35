"""Key notation and scripted keystroke sources.

Key names follow Vim's ``<...>`` notation, mapped onto prompt_toolkit keys:

- Plain characters insert themselves: ``"abc"``
- Named keys: ``<Left>``, ``<Right>``, ``<Up>``, ``<Down>``, ``<Home>``, ``<End>``,
  ``<BS>``, ``<Del>``, ``<Tab>``, ``<S-Tab>``, ``<CR>``/``<Enter>``, ``<Esc>``
- Control: ``<C-w>``, ``<C-u>``, ``<C-Left>`` (any prompt_toolkit ``c-*`` key)
- Shift: ``<S-Left>``, ``<S-Right>``
- Literal ``<``: ``<lt>``
"""

import re
from typing import Dict, Iterable, List, Union

from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys

from livetpl.core.interfaces.input import InputSourceProtocol

_TOKEN_RX = re.compile(r'<([^<>\s]+)>')

_NAMED: Dict[str, Union[Keys, str]] = {
    'left': Keys.Left,
    'right': Keys.Right,
    'up': Keys.Up,
    'down': Keys.Down,
    'home': Keys.Home,
    'end': Keys.End,
    'bs': Keys.Backspace,
    'backspace': Keys.Backspace,
    'del': Keys.Delete,
    'delete': Keys.Delete,
    'tab': Keys.Tab,
    's-tab': Keys.BackTab,
    'cr': Keys.Enter,
    'enter': Keys.Enter,
    'return': Keys.Enter,
    'nl': Keys.ControlJ,
    'esc': Keys.Escape,
    'escape': Keys.Escape,
    'scrollup': Keys.ScrollUp,
    'scrolldown': Keys.ScrollDown,
    'mouse': Keys.Vt100MouseEvent,
    'space': ' ',
    'lt': '<',
}


def key_from_name(name: str) -> Union[Keys, str]:
    """Resolve one ``<...>`` name (without brackets) to a key."""
    low = name.lower()
    if low in _NAMED:
        return _NAMED[low]
    try:
        return Keys(low)
    except ValueError:
        raise ValueError(f'unknown key name <{name}>') from None


def parse_keys(notation: str) -> List[KeyPress]:
    """Turn *notation* into the list of key presses it describes.

    Example:
        >>> [k.key for k in parse_keys("ab<Left>")]
        ['a', 'b', <Keys.Left: 'left'>]
    """
    presses: List[KeyPress] = []
    pos = 0
    for m in _TOKEN_RX.finditer(notation):
        presses.extend(KeyPress(ch, ch) for ch in notation[pos:m.start()])
        presses.append(KeyPress(key_from_name(m.group(1))))
        pos = m.end()
    presses.extend(KeyPress(ch, ch) for ch in notation[pos:])
    return presses


class ScriptedInput(InputSourceProtocol):
    """Input source replaying a fixed sequence of key presses.

    Raises EOFError once the script is exhausted.
    """

    def __init__(self, keys: Union[str, Iterable[KeyPress]]) -> None:
        self._keys: List[KeyPress] = parse_keys(keys) if isinstance(keys, str) else list(keys)
        self._pos = 0

    @property
    def consumed(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._keys) - self._pos

    def extend(self, keys: Union[str, Iterable[KeyPress]]) -> None:
        self._keys.extend(parse_keys(keys) if isinstance(keys, str) else keys)

    def next_input_event(self) -> KeyPress:  # type: ignore[override]
        if self._pos >= len(self._keys):
            raise EOFError('scripted input exhausted')
        kp = self._keys[self._pos]
        self._pos += 1
        return kp
