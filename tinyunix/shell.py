"""Parsing shell command lines into command trees."""

from dataclasses import dataclass, field
from typing import List, Tuple

from .layout import O_CREATE, O_RDONLY, O_TRUNC, O_WRONLY

MAXARGS = 10
WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"


class ShellSyntaxError(ValueError):
    """A command line could not be parsed."""

    def __init__(self, message: str, leftovers: str = ""):
        super().__init__(message)
        self.leftovers = leftovers


class Command:
    """Base of every parsed command."""


@dataclass
class ExecCmd(Command):
    """Run a program with arguments."""

    argv: List[str] = field(default_factory=list)


@dataclass
class RedirCmd(Command):
    """Run ``cmd`` with descriptor ``fd`` opened on ``file`` in ``mode``."""

    cmd: Command
    file: str
    mode: int
    fd: int


@dataclass
class PipeCmd(Command):
    """Connect the output of ``left`` to the input of ``right``."""

    left: Command
    right: Command


@dataclass
class ListCmd(Command):
    """Run ``left``, then ``right``."""

    left: Command
    right: Command


@dataclass
class BackCmd(Command):
    """Run ``cmd`` in the background."""

    cmd: Command


class _Parser:
    def __init__(self, line: str):
        self.s = line
        self.pos = 0

    def _skip_space(self) -> None:
        while self.pos < len(self.s) and self.s[self.pos] in WHITESPACE:
            self.pos += 1

    def peek(self, toks: str) -> bool:
        self._skip_space()
        return self.pos < len(self.s) and self.s[self.pos] in toks

    def gettoken(self) -> Tuple[str, str]:
        """Return (kind, text); kind is a symbol, '+' for >>, 'a' for a word, '' at end."""
        self._skip_space()
        start = self.pos
        if self.pos == len(self.s):
            kind = ""
        else:
            c = self.s[self.pos]
            if c in "|();&<":
                kind = c
                self.pos += 1
            elif c == ">":
                kind = ">"
                self.pos += 1
                if self.pos < len(self.s) and self.s[self.pos] == ">":
                    kind = "+"
                    self.pos += 1
            else:
                kind = "a"
                while (
                    self.pos < len(self.s)
                    and self.s[self.pos] not in WHITESPACE
                    and self.s[self.pos] not in SYMBOLS
                ):
                    self.pos += 1
        word = self.s[start:self.pos]
        self._skip_space()
        return kind, word

    def parse(self) -> Command:
        cmd = self.parseline()
        self.peek("")
        if self.pos != len(self.s):
            raise ShellSyntaxError("syntax", self.s[self.pos:])
        return cmd

    def parseline(self) -> Command:
        cmd = self.parsepipe()
        while self.peek("&"):
            self.gettoken()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.gettoken()
            cmd = ListCmd(cmd, self.parseline())
        return cmd

    def parsepipe(self) -> Command:
        cmd = self.parseexec()
        if self.peek("|"):
            self.gettoken()
            cmd = PipeCmd(cmd, self.parsepipe())
        return cmd

    def parseredirs(self, cmd: Command) -> Command:
        while self.peek("<>"):
            tok, _ = self.gettoken()
            kind, word = self.gettoken()
            if kind != "a":
                raise ShellSyntaxError("missing file for redirection")
            if tok == "<":
                cmd = RedirCmd(cmd, word, O_RDONLY, 0)
            elif tok == ">":
                cmd = RedirCmd(cmd, word, O_WRONLY | O_CREATE | O_TRUNC, 1)
            else:
                cmd = RedirCmd(cmd, word, O_WRONLY | O_CREATE, 1)
        return cmd

    def parseblock(self) -> Command:
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.gettoken()
        cmd = self.parseline()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.gettoken()
        return self.parseredirs(cmd)

    def parseexec(self) -> Command:
        if self.peek("("):
            return self.parseblock()
        ecmd = ExecCmd()
        ret = self.parseredirs(ecmd)
        while not self.peek("|)&;"):
            kind, word = self.gettoken()
            if kind == "":
                break
            if kind != "a":
                raise ShellSyntaxError("syntax")
            ecmd.argv.append(word)
            if len(ecmd.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            ret = self.parseredirs(ret)
        return ret


def parse_command(line: str) -> Command:
    """Parse one command line into a tree of commands."""
    return _Parser(line).parse()