import io

from sbtrace.buffer import Buffer


def test_characters_with_newline_appended():
    buf = Buffer(io.StringIO("ab\ncd"))
    assert list(buf) == ["a", "b", "\n", "c", "d", "\n"]


def test_end_of_input_returns_empty_repeatedly():
    buf = Buffer(io.StringIO("x\n"))
    assert buf.get_ch() == "x"
    assert buf.get_ch() == "\n"
    assert buf.get_ch() == ""
    assert buf.get_ch() == ""


def test_empty_stream():
    assert Buffer(io.StringIO("")).get_ch() == ""


def test_line_and_column_tracking():
    buf = Buffer(io.StringIO("ab\ncd\n"))
    seen = []
    for _ in range(5):
        ch = buf.get_ch()
        seen.append((ch, buf.line_number, buf.column))
    assert seen[0] == ("a", 1, 0)
    assert seen[1] == ("b", 1, 1)
    assert seen[3] == ("c", 2, 0)
    assert seen[4] == ("d", 2, 1)


def test_blank_lines_yield_newlines():
    buf = Buffer(io.StringIO("\n\nz"))
    assert "".join(buf) == "\n\nz\n"
    assert buf.line_number == 3


def test_print_line_only_once_per_line():
    buf = Buffer(io.StringIO("hello\nworld\n"))
    buf.get_ch()
    out = io.StringIO()
    buf.print_line(out)
    buf.print_line(out)
    assert out.getvalue() == "# hello\n\n"


def test_print_lines_echoes_to_stdout(capsys):
    buf = Buffer(io.StringIO("one\ntwo\n"), print_lines=True)
    assert "".join(buf) == "one\ntwo\n"
    captured = capsys.readouterr().out
    assert "# one\n" in captured
    assert "# two\n" in captured


def test_print_chars_echoes_each_character(capsys):
    buf = Buffer(io.StringIO("q"), print_chars=True)
    assert buf.get_ch() == "q"
    assert "Read character `q'" in capsys.readouterr().out