import pytest

from minish.commands import Command, build_commands, collect_args
from minish.environment import Environment
from minish.errors import ShellSyntaxError
from minish.tokens import tokenize


def build(line, reader=None):
    return build_commands(tokenize(line), Environment([]), 0, reader)


def make_reader(lines, calls=None):
    pending = list(lines)

    def reader(prompt):
        if calls is not None:
            calls.append(prompt)
        return pending.pop(0) if pending else None

    return reader


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_collect_args_skips_redirection_targets():
    tokens = tokenize("cat -e < in.txt extra")
    assert collect_args(tokens, 0) == ["cat", "-e", "extra"]


def test_collect_args_stops_at_pipe():
    tokens = tokenize("ls -l | wc -c")
    assert collect_args(tokens, 0) == ["ls", "-l"]
    assert collect_args(tokens, 3) == ["wc", "-c"]


def test_pipeline_without_redirections():
    commands = build("ls -l | wc -c")
    assert [c.args for c in commands] == [["ls", "-l"], ["wc", "-c"]]
    assert all(c.infile is None and c.outfile is None and not c.skip for c in commands)


def test_output_redirection_creates_file(workdir):
    (command,) = build("echo hi > out.txt")
    with command:
        assert command.args == ["echo", "hi"]
        command.outfile.write(b"data")
    assert (workdir / "out.txt").read_bytes() == b"data"


def test_truncate_empties_existing_file(workdir):
    (workdir / "out.txt").write_bytes(b"old")
    (command,) = build("echo > out.txt")
    assert command.args == ["echo"]
    assert not command.skip
    command.close()
    assert command.outfile is None
    assert (workdir / "out.txt").read_bytes() == b""


def test_append_keeps_existing_content(workdir):
    (workdir / "out.txt").write_bytes(b"old")
    (command,) = build("echo >> out.txt")
    assert command.args == ["echo"]
    command.outfile.write(b"new")
    command.close()
    assert command.outfile is None
    assert (workdir / "out.txt").read_bytes() == b"oldnew"


def test_input_redirection_reads_file(workdir):
    (workdir / "in.txt").write_bytes(b"content")
    (command,) = build("cat < in.txt")
    with command:
        assert command.infile.read() == b"content"
        assert command.args == ["cat"]


def test_last_input_wins(workdir):
    (workdir / "a").write_bytes(b"first")
    (workdir / "b").write_bytes(b"second")
    (command,) = build("cat < a < b")
    with command:
        assert command.infile.read() == b"second"


def test_missing_input_skips_command(workdir, capsys):
    (command,) = build("cat < missing.txt > out.txt")
    assert command.skip
    assert command.args == []
    assert command.infile is None and command.outfile is None
    assert not (workdir / "out.txt").exists()
    assert "missing.txt: " in capsys.readouterr().err


def test_failed_output_closes_input(workdir):
    (workdir / "in.txt").write_bytes(b"x")
    (command,) = build("cat < in.txt > nodir/out.txt")
    assert command.skip
    assert command.infile is None
    assert command.outfile is None


def test_heredoc_becomes_input(workdir):
    (command,) = build("cat << END", make_reader(["x", "END"]))
    with command:
        assert command.infile.read() == b"x\n"


def test_failed_input_stops_later_heredoc(workdir):
    calls = []
    (command,) = build("cat < missing << END", make_reader(["END"], calls))
    assert command.skip
    assert calls == []


def test_redirection_followed_by_operator_is_syntax_error():
    with pytest.raises(ShellSyntaxError) as info:
        build("cat < | wc")
    assert str(info.value) == "syntax error near unexpected token '|'"
    assert info.value.exit_code == 2


def test_syntax_error_closes_opened_files(workdir):
    (workdir / "in.txt").write_bytes(b"x")
    with pytest.raises(ShellSyntaxError):
        build("cat < in.txt > >")
    assert (workdir / "in.txt").read_bytes() == b"x"


def test_close_releases_files(workdir):
    (workdir / "in.txt").write_bytes(b"x")
    (command,) = build("cat < in.txt > out.txt")
    infile, outfile = command.infile, command.outfile
    command.close()
    assert infile.closed and outfile.closed
    assert command.infile is None and command.outfile is None


def test_default_command_is_empty():
    command = Command()
    assert command.args == [] and not command.skip