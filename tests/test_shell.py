import pytest

from tinyunix.layout import O_CREATE, O_RDONLY, O_TRUNC, O_WRONLY
from tinyunix.shell import (
    MAXARGS,
    BackCmd,
    ExecCmd,
    ListCmd,
    PipeCmd,
    RedirCmd,
    ShellSyntaxError,
    parse_command,
)


def test_simple_command():
    assert parse_command("echo hello world\n") == ExecCmd(["echo", "hello", "world"])


def test_empty_line():
    assert parse_command("   \n") == ExecCmd([])


def test_pipeline_is_right_nested():
    assert parse_command("a | b | c") == PipeCmd(
        ExecCmd(["a"]), PipeCmd(ExecCmd(["b"]), ExecCmd(["c"]))
    )


def test_redirections_wrap_in_order():
    assert parse_command("cat < in > out") == RedirCmd(
        RedirCmd(ExecCmd(["cat"]), "in", O_RDONLY, 0),
        "out",
        O_WRONLY | O_CREATE | O_TRUNC,
        1,
    )


def test_append_redirection():
    assert parse_command("echo x >>log") == RedirCmd(
        ExecCmd(["echo", "x"]), "log", O_WRONLY | O_CREATE, 1
    )


def test_redirection_before_arguments():
    assert parse_command("< in grep a") == RedirCmd(ExecCmd(["grep", "a"]), "in", O_RDONLY, 0)


def test_list_and_background():
    assert parse_command("a & ; b") == ListCmd(BackCmd(ExecCmd(["a"])), ExecCmd(["b"]))
    assert parse_command("a&&") == BackCmd(BackCmd(ExecCmd(["a"])))


def test_block_with_redirection():
    assert parse_command("(a ; b) > f") == RedirCmd(
        ListCmd(ExecCmd(["a"]), ExecCmd(["b"])), "f", O_WRONLY | O_CREATE | O_TRUNC, 1
    )


def test_symbols_split_words():
    assert parse_command("ls|wc") == PipeCmd(ExecCmd(["ls"]), ExecCmd(["wc"]))


def test_missing_redirection_file():
    with pytest.raises(ShellSyntaxError, match="missing file for redirection"):
        parse_command("echo >")


def test_missing_close_paren():
    with pytest.raises(ShellSyntaxError, match="missing \\)"):
        parse_command("(a ; b")


def test_leftovers():
    with pytest.raises(ShellSyntaxError) as info:
        parse_command("a ) b")
    assert info.value.leftovers == ") b"


def test_symbol_in_arguments():
    with pytest.raises(ShellSyntaxError, match="syntax"):
        parse_command("echo (")


def test_too_many_args():
    words = ["w"] * MAXARGS
    with pytest.raises(ShellSyntaxError, match="too many args"):
        parse_command(" ".join(words))
    assert parse_command(" ".join(words[:-1])) == ExecCmd(words[:-1])