"""Unit tests for shellmate.buffer."""

import pytest

from shellmate.buffer import ShellBuffer

RED = "\x1b[31m"


def written(*chunks) -> str:
    buffer = ShellBuffer()
    for chunk in chunks:
        buffer.write(chunk)
    return buffer.render()


class TestPlainText:
    def test_appends_writes(self):
        buffer = ShellBuffer()
        buffer.write("hello")
        assert buffer.render() == "hello"
        buffer.write(" world")
        assert buffer.render() == "hello world"
        buffer.write("!")
        assert buffer.render() == "hello world!"
        assert buffer.cursor == len("hello world!")

    def test_multibyte_text_round_trips(self):
        assert written("~/butterfish ᐅ") == "~/butterfish ᐅ"

    def test_multibyte_bytes_split_across_writes(self):
        encoded = "prompt ᐅ ".encode()
        split = encoded.index("ᐅ".encode()) + 1
        assert written(encoded[:split], encoded[split:]) == "prompt ᐅ "

    def test_str_and_bytes_mix(self):
        assert written(b"ls ", "-la") == "ls -la"

    def test_new_buffer_is_empty(self):
        buffer = ShellBuffer()
        assert buffer.render() == ""
        assert str(buffer) == ""
        assert len(buffer) == 0
        assert buffer.cursor == 0


class TestDeletion:
    def test_backspace_letter_idiom(self):
        assert written(bytes([0x6C, 0x08, 0x6C, 0x73, 0x20])) == "ls "

    def test_delete_removes_previous_character(self):
        assert written(b"lss\x7f") == "ls"

    def test_two_controls_remove_two_characters(self):
        assert written(b"echo hi!!\x08\x7f") == "echo hi"

    def test_deletion_at_start_is_noop(self):
        buffer = ShellBuffer()
        buffer.write(b"\x08\x7f\x08")
        assert buffer.render() == ""
        assert buffer.cursor == 0
        buffer.write(b"ok")
        assert buffer.render() == "ok"

    def test_deletes_whole_multibyte_character(self):
        assert written("aᐅ".encode(), b"\x7f") == "a"


class TestCursorMovement:
    def test_left_arrow_does_not_change_text(self):
        buffer = ShellBuffer()
        buffer.write("hello world!")
        buffer.write("\x1b[D")
        assert buffer.render() == "hello world!"
        assert buffer.cursor == len("hello world!") - 1

    def test_insertion_after_cursor_left(self):
        buffer = ShellBuffer()
        buffer.write("hello world")
        buffer.write("\x1b[D\x1b[D\x1b[D\x1b[D\x1b[D")
        buffer.write("foo   ")
        buffer.write("\x08\x7f")
        assert buffer.render() == "hello foo world"

    def test_numeric_count(self):
        buffer = ShellBuffer()
        buffer.write("abcdef\x1b[3DX")
        assert buffer.render() == "abcXdef"
        buffer.write("\x1b[2CY")
        assert buffer.render() == "abcXdeYf"

    def test_zero_count_moves_one_column(self):
        assert written("ab\x1b[0DX") == "aXb"

    def test_left_is_clamped_at_start(self):
        buffer = ShellBuffer()
        buffer.write("ab\x1b[10D")
        assert buffer.cursor == 0
        buffer.write("X")
        assert buffer.render() == "Xab"

    def test_right_is_clamped_at_end(self):
        buffer = ShellBuffer()
        buffer.write("ab\x1b[D\x1b[5C")
        assert buffer.cursor == 2
        buffer.write("c")
        assert buffer.render() == "abc"

    def test_backspace_in_middle_of_line(self):
        assert written("abcd\x1b[2D\x08") == "acd"


class TestOpaqueSequences:
    def test_color_sequence_is_kept_in_place(self):
        assert written("foo", RED, "bar") == "foo" + RED + "bar"

    def test_cursor_advances_past_opaque_sequence(self):
        buffer = ShellBuffer()
        buffer.write("foo" + RED)
        assert buffer.cursor == len("foo" + RED)

    def test_opaque_sequence_inserted_at_cursor(self):
        assert written("ab\x1b[D" + RED) == "a" + RED + "b"

    def test_movement_with_non_numeric_parameter_is_opaque(self):
        assert written("ab\x1b[1;5D") == "ab\x1b[1;5D"

    def test_lone_escape_is_kept(self):
        assert written("a\x1bb") == "a\x1bb"

    def test_osc_sequence_is_kept(self):
        assert written("\x1b]0;title\x07$ ") == "\x1b]0;title\x07$ "


class TestChunking:
    SEQUENCE = "hello world\x1b[5Dfoo   \x08\x7f" + RED + "!\x1b[0m"

    def test_sequence_split_across_writes(self):
        buffer = ShellBuffer()
        buffer.write("hello\x1b[")
        assert buffer.render() == "hello"
        buffer.write("2D")
        buffer.write("X")
        assert buffer.render() == "helXlo"

    def test_trailing_escape_waits_for_next_write(self):
        buffer = ShellBuffer()
        buffer.write("ab\x1b")
        assert buffer.render() == "ab"
        buffer.write("[DX")
        assert buffer.render() == "aXb"

    @pytest.mark.parametrize("size", [1, 2, 3, 5, 7])
    def test_chunked_writes_match_single_write(self, size):
        data = self.SEQUENCE.encode()
        chunks = [data[i : i + size] for i in range(0, len(data), size)]
        assert written(*chunks) == written(data)

    def test_single_write_result(self):
        assert written(self.SEQUENCE) == "hello foo " + RED + "!\x1b[0mworld"


class TestReset:
    def test_reset_clears_line_and_pending_sequence(self):
        buffer = ShellBuffer()
        buffer.write("abc\x1b[")
        buffer.reset()
        assert buffer.render() == ""
        assert buffer.cursor == 0
        buffer.write("D")
        assert buffer.render() == "D"
