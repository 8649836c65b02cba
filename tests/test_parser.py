import pytest

from minish.environment import Environment
from minish.errors import ShellSyntaxError
from minish.parser import ParseError, is_blank, parse_line


@pytest.mark.parametrize("line", ["", "   ", " \t\n\v\f\r"])
def test_blank_lines(line):
    assert is_blank(line) is True


def test_non_blank_line():
    assert is_blank("  x ") is False


def test_open_quote_is_rejected():
    with pytest.raises(ParseError) as info:
        parse_line('echo "abc', Environment([]), 0)
    assert str(info.value) == "err : open quote"
    assert info.value.exit_code == 2


def test_variables_are_expanded():
    env = Environment(["HOME=/home/u"])
    (command,) = parse_line("echo $HOME", env, 0)
    assert command.args == ["echo", "/home/u"]


def test_exit_status_is_expanded():
    (command,) = parse_line("echo $?", Environment([]), 7)
    assert command.args == ["echo", "7"]


def test_quotes_are_removed():
    (command,) = parse_line('echo "a b" c', Environment([]), 0)
    assert command.args == ["echo", "a b", "c"]


def test_single_quotes_block_expansion():
    env = Environment(["HOME=/home/u"])
    (command,) = parse_line("echo '$HOME'", env, 0)
    assert command.args == ["echo", "$HOME"]


def test_pipeline_gives_one_command_per_stage():
    commands = parse_line("ls | grep x | wc -l", Environment([]), 0)
    assert [c.args[0] for c in commands] == ["ls", "grep", "wc"]


def test_trailing_pipe_is_rejected():
    with pytest.raises(ShellSyntaxError) as info:
        parse_line("ls |", Environment([]), 0)
    assert str(info.value) == "Error: Unclosed pipe"


def test_trailing_redirection_is_rejected():
    with pytest.raises(ShellSyntaxError) as info:
        parse_line("cat <", Environment([]), 0)
    assert str(info.value) == "Error: Unclosed input"


def test_leading_pipe_keeps_exit_status():
    with pytest.raises(ParseError) as info:
        parse_line("| ls", Environment([]), 0)
    assert str(info.value) == "syntax error near unexpected token '|'"
    assert info.value.exit_code is None


def test_line_empty_after_expansion_gives_no_commands():
    assert parse_line("$NOPE", Environment([]), 0) == []


def test_heredoc_delimiter_and_reader(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    lines = ["line one", "STOP"]
    (command,) = parse_line("cat << STOP", Environment([]), 0, lambda prompt: lines.pop(0))
    with command:
        assert command.infile.read() == b"line one\n"
    assert lines == []