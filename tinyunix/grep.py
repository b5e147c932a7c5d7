"""A line filter with a tiny regular-expression language: ^ . * $ and literals."""

import sys
from typing import IO, Iterator, List, Optional

# Lines are gathered in a buffer of this many bytes, one kept for the terminator.
BUFSIZE = 1024


def _matchhere(re: str, ri: int, text: str, ti: int) -> bool:
    while True:
        if ri == len(re):
            return True
        if ri + 1 < len(re) and re[ri + 1] == "*":
            return _matchstar(re[ri], re, ri + 2, text, ti)
        if re[ri] == "$" and ri + 1 == len(re):
            return ti == len(text)
        if ti < len(text) and (re[ri] == "." or re[ri] == text[ti]):
            ri += 1
            ti += 1
            continue
        return False


def _matchstar(c: str, re: str, ri: int, text: str, ti: int) -> bool:
    while True:
        if _matchhere(re, ri, text, ti):
            return True
        if ti < len(text) and (text[ti] == c or c == "."):
            ti += 1
            continue
        return False


def match(pattern: str, text: str) -> bool:
    """True if ``pattern`` matches somewhere in ``text``."""
    if pattern.startswith("^"):
        return _matchhere(pattern, 1, text, 0)
    return any(_matchhere(pattern, 0, text, start) for start in range(len(text) + 1))


def grep(pattern: str, stream: IO[str]) -> Iterator[str]:
    """Yield each newline-terminated line of ``stream`` that matches ``pattern``.

    A trailing line without a newline is never reported, and reading stops
    once a single line fills the whole buffer.
    """
    pending = ""
    while True:
        room = BUFSIZE - 1 - len(pending)
        if room <= 0:
            break
        chunk = stream.read(room)
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                yield line + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    """Run grep with ``argv`` (pattern, then files) and return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    if not files:
        sys.stdout.writelines(grep(pattern, sys.stdin))
        return 0
    for name in files:
        try:
            handle = open(name, encoding="latin-1", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {name}\n")
            return 1
        with handle:
            sys.stdout.writelines(grep(pattern, handle))
    return 0