"""Tests for the line editor state machine, key notation and completion."""
from __future__ import annotations

import unittest

from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys

from livetpl.editing.completion import CompleterProvider, as_completion_provider
from livetpl.editing.keys import ScriptedInput, key_from_name, parse_keys
from livetpl.editing.line_editor import EditorMode, LineEditor, normalize_key
from livetpl.errors import CompletionProviderError


def _run(notation, default="", **kwargs):
    editor = LineEditor(default, **kwargs)
    return editor, editor.run(ScriptedInput(notation))


def _feed(editor, notation):
    for kp in parse_keys(notation):
        editor.feed(kp)
    return editor


# --------------------------------------------------------------------------- #
#  Key notation                                                               #
# --------------------------------------------------------------------------- #
class KeyNotationTests(unittest.TestCase):
    def test_characters_and_named_keys(self):
        keys = [kp.key for kp in parse_keys("ab<Left><S-Tab><C-w><Esc>")]
        self.assertEqual(keys, ["a", "b", Keys.Left, Keys.BackTab, Keys.ControlW, Keys.Escape])

    def test_literal_lt_and_space(self):
        self.assertEqual([kp.data for kp in parse_keys("<lt>x<Space>")], ["<", "x", " "])

    def test_unknown_name_raises(self):
        with self.assertRaises(ValueError):
            key_from_name("Nope")

    def test_unbracketed_text_is_literal(self):
        self.assertEqual([kp.key for kp in parse_keys("a > b")], ["a", " ", ">", " ", "b"])

    def test_scripted_input_exhausts(self):
        src = ScriptedInput("a")
        self.assertEqual(src.next_input_event(), KeyPress("a"))
        self.assertEqual(src.consumed, 1)
        with self.assertRaises(EOFError):
            src.next_input_event()

    def test_scripted_input_can_be_extended(self):
        src = ScriptedInput("a")
        src.extend("<CR>")
        src.extend([KeyPress("b", "b")])
        self.assertEqual(src.remaining, 3)
        self.assertEqual([src.next_input_event().key for _ in range(3)], ["a", Keys.Enter, "b"])


# --------------------------------------------------------------------------- #
#  Editing                                                                    #
# --------------------------------------------------------------------------- #
class EditingTests(unittest.TestCase):
    def test_insert_in_the_middle(self):
        editor, value = _run("ABCD<Left><Left>12<Enter>")
        self.assertEqual(value, "AB12CD")
        self.assertIs(editor.mode, EditorMode.ACCEPTED)

    def test_escape_returns_none_not_empty(self):
        editor, value = _run("<Esc>")
        self.assertIsNone(value)
        self.assertIs(editor.mode, EditorMode.ABORTED)

    def test_escape_discards_default(self):
        _, value = _run("xyz<Esc>", default="keep")
        self.assertIsNone(value)

    def test_default_with_cursor_at_end(self):
        _, value = _run("!<CR>", default="hi")
        self.assertEqual(value, "hi!")

    def test_ctrl_j_accepts(self):
        _, value = _run("ok<NL>")
        self.assertEqual(value, "ok")

    def test_backspace_and_delete(self):
        editor = _feed(LineEditor("abc"), "<BS>")
        self.assertEqual((editor.buffer, editor.cursor), ("ab", 2))
        _feed(editor, "<Home><BS>")
        self.assertEqual((editor.buffer, editor.cursor), ("ab", 0))
        _feed(editor, "<Del>")
        self.assertEqual((editor.buffer, editor.cursor), ("b", 0))
        _feed(editor, "<End><Del>")
        self.assertEqual((editor.buffer, editor.cursor), ("b", 1))

    def test_left_right_are_clamped(self):
        editor = _feed(LineEditor("ab"), "<Right><Right>")
        self.assertEqual(editor.cursor, 2)
        _feed(editor, "<Left><Left><Left>")
        self.assertEqual(editor.cursor, 0)

    def test_ctrl_b_and_ctrl_e(self):
        editor = _feed(LineEditor("hello"), "<C-b>")
        self.assertEqual(editor.cursor, 0)
        _feed(editor, "<C-e>")
        self.assertEqual(editor.cursor, 5)

    def test_word_motions(self):
        editor = _feed(LineEditor("foo bar baz"), "<S-Left>")
        self.assertEqual(editor.cursor, 8)
        _feed(editor, "<C-Left><C-Left>")
        self.assertEqual(editor.cursor, 0)
        _feed(editor, "<S-Right>")
        self.assertEqual(editor.cursor, 3)
        _feed(editor, "<C-Right>")
        self.assertEqual(editor.cursor, 7)

    def test_word_motions_on_multibyte_text(self):
        editor = _feed(LineEditor("日本 über"), "<S-Left>")
        self.assertEqual(editor.buffer[editor.cursor:], "über")
        _feed(editor, "<Home><S-Right>")
        self.assertEqual(editor.buffer[:editor.cursor], "日本")

    def test_delete_word(self):
        editor = _feed(LineEditor("foo bar "), "<C-w>")
        self.assertEqual((editor.buffer, editor.cursor), ("foo ", 4))
        _feed(editor, "<C-w>")
        self.assertEqual((editor.buffer, editor.cursor), ("", 0))

    def test_delete_to_start(self):
        editor = _feed(LineEditor("abcdef"), "<Left><Left><C-u>")
        self.assertEqual((editor.buffer, editor.cursor), ("ef", 0))

    def test_bracketed_paste_inserts_text(self):
        editor = LineEditor("")
        editor.feed(KeyPress(Keys.BracketedPaste, "a\r\nb"))
        self.assertEqual(editor.buffer, "a\nb")

    def test_mouse_and_unknown_keys_are_ignored(self):
        editor = LineEditor("x")
        for key in (Keys.ScrollUp, Keys.Vt100MouseEvent, Keys.F5, Keys.CPRResponse):
            self.assertIsNone(editor.feed(KeyPress(key)))
        self.assertIsNone(editor.feed(KeyPress("\x00")))
        self.assertEqual((editor.buffer, editor.cursor, editor.mode), ("x", 1, EditorMode.EDITING))

    def test_string_key_names_are_understood(self):
        self.assertIs(normalize_key("left"), Keys.Left)
        self.assertIs(normalize_key("c-i"), Keys.Tab)
        self.assertEqual(normalize_key("x"), "x")

    def test_render_shows_prompt_and_buffer(self):
        editor = _feed(LineEditor("x", prompt="name: "), "y")
        self.assertEqual(editor.render(), "name: xy")

    def test_feed_after_accept_raises(self):
        editor = _feed(LineEditor(""), "<CR>")
        with self.assertRaises(RuntimeError):
            editor.feed(KeyPress("a"))


# --------------------------------------------------------------------------- #
#  Per-keystroke callback                                                     #
# --------------------------------------------------------------------------- #
class CallbackTests(unittest.TestCase):
    def test_called_with_buffer_and_key(self):
        seen = []
        editor = LineEditor("")
        editor.run(ScriptedInput("ab<BS><ScrollUp><CR>"), on_key=lambda buf, kp: seen.append((buf, kp.key)))
        self.assertEqual(seen, [("a", "a"), ("ab", "b"), ("a", Keys.Backspace)])

    def test_truthy_result_accepts_early(self):
        src = ScriptedInput("abc<CR>")
        editor = LineEditor("")
        value = editor.run(src, on_key=lambda buf, kp: buf == "ab")
        self.assertEqual(value, "ab")
        self.assertEqual(src.remaining, 2)


# --------------------------------------------------------------------------- #
#  Completion                                                                 #
# --------------------------------------------------------------------------- #
class CompletionTests(unittest.TestCase):
    def setUp(self):
        self.calls = []

        def provider(stub, line, cursor):
            self.calls.append((stub, line, cursor))
            return ["foo", "bar"]

        self.provider = provider

    def test_tab_cycles_with_wrap_around(self):
        editor = LineEditor("st", completion_provider=self.provider)
        seen = []
        for _ in range(3):
            _feed(editor, "<Tab>")
            seen.append(editor.buffer)
        self.assertEqual(seen, ["foo", "bar", "st"])
        self.assertEqual(self.calls, [("st", "st", 2)])

    def test_shift_tab_goes_back(self):
        editor = _feed(LineEditor("st", completion_provider=self.provider), "<Tab>")
        self.assertEqual(editor.buffer, "foo")
        _feed(editor, "<S-Tab>")
        self.assertEqual(editor.buffer, "st")
        _feed(editor, "<Up>")
        self.assertEqual(editor.buffer, "bar")
        _feed(editor, "<Down>")
        self.assertEqual(editor.buffer, "st")

    def test_typing_leaves_completion_keeping_choice(self):
        editor = _feed(LineEditor("", completion_provider=self.provider), "<Tab><Tab>")
        self.assertIs(editor.mode, EditorMode.COMPLETING)
        _feed(editor, "!")
        self.assertIs(editor.mode, EditorMode.EDITING)
        self.assertIsNone(editor.completion)
        self.assertEqual(editor.buffer, "bar!")
        _feed(editor, "<Tab>")
        self.assertEqual(self.calls[-1][0], "bar!")

    def test_no_provider_makes_tab_a_noop(self):
        editor = _feed(LineEditor("x"), "<Tab><Down>")
        self.assertEqual((editor.buffer, editor.mode), ("x", EditorMode.EDITING))

    def test_provider_failure_surfaces(self):
        def broken(stub, line, cursor):
            raise OSError("boom")

        editor = LineEditor("x", completion_provider=broken)
        with self.assertRaises(CompletionProviderError) as ctx:
            _feed(editor, "<Tab>")
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_word_list_source(self):
        provider = as_completion_provider(["alpha", "beta", "alpine"])
        self.assertEqual(provider("al", "al", 2), ["alpha", "alpine"])

    def test_completer_adapter_applies_start_position(self):
        provider = CompleterProvider(WordCompleter(["world", "word"]))
        self.assertEqual(provider("hello wo", "hello wo", 8), ["hello world", "hello word"])

    def test_source_normalization(self):
        self.assertIsNone(as_completion_provider(None))
        self.assertIs(as_completion_provider(self.provider), self.provider)
        with self.assertRaises(TypeError):
            as_completion_provider("abc")


if __name__ == "__main__":
    unittest.main()
