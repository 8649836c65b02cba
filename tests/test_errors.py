import pytest

from minish.errors import (
    ShellExit,
    ShellSyntaxError,
    print_error,
    shell_error,
    syntax_error_message,
)


def test_syntax_error_at_end_of_line_mentions_newline():
    assert syntax_error_message(None) == "syntax error near unexpected token 'newline'"


def test_syntax_error_quotes_the_offending_token():
    message = syntax_error_message("|")
    assert message.endswith("'|'")
    assert message.startswith("syntax error near unexpected token")


def test_print_error_writes_to_stderr_verbatim(capsys):
    print_error("boom\n")
    captured = capsys.readouterr()
    assert captured.err == "boom\n"
    assert captured.out == ""


def test_print_error_ignores_empty_message(capsys):
    print_error("")
    print_error(None)
    assert capsys.readouterr().err == ""


def test_shell_error_prefixes_shell_name(capsys):
    shell_error("bad thing")
    assert capsys.readouterr().err == "shell: bad thing\n"


def test_shell_exit_carries_code():
    error = ShellExit(3)
    assert error.code == 3
    with pytest.raises(ShellExit) as info:
        raise error
    assert info.value.code == 3


def test_syntax_error_defaults_to_status_two():
    error = ShellSyntaxError("oops")
    assert error.exit_code == 2
    assert str(error) == "oops"


def test_syntax_error_custom_status():
    assert ShellSyntaxError("oops", exit_code=1).exit_code == 1