"""Small file utilities: cat, echo, wc, ls, find and a prime sieve."""

import os
import shutil
import stat as _stat
import sys
from typing import BinaryIO, Iterable, Iterator, List, NamedTuple, Optional, Union

DIRSIZ = 14
T_DIR = 1
T_FILE = 2
T_DEVICE = 3

_LS_BUFSIZE = 512
# NUL counts as a separator because the separator set is searched as a C string.
_WC_SEPARATORS = frozenset(b" \r\t\n\v\0")


class WcCounts(NamedTuple):
    lines: int
    words: int
    chars: int


def cat(streams: Iterable[BinaryIO], out: BinaryIO) -> None:
    """Copy every stream, in order, to ``out``."""
    for stream in streams:
        shutil.copyfileobj(stream, out)


def echo(args: Iterable[str]) -> str:
    """Join the arguments with spaces and end with a newline; nothing if empty."""
    args = list(args)
    return " ".join(args) + "\n" if args else ""


def wc_counts(data: Union[bytes, bytearray, str]) -> WcCounts:
    """Count lines, words and bytes in ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    lines = words = 0
    inword = False
    for byte in data:
        if byte == 0x0A:
            lines += 1
        if byte in _WC_SEPARATORS:
            inword = False
        elif not inword:
            words += 1
            inword = True
    return WcCounts(lines, words, len(data))


def fmtname(path: str) -> str:
    """Last path component, blank-padded to DIRSIZ characters."""
    name = path.rsplit("/", 1)[-1]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _file_type(st: os.stat_result) -> int:
    if _stat.S_ISDIR(st.st_mode):
        return T_DIR
    if _stat.S_ISREG(st.st_mode):
        return T_FILE
    return T_DEVICE


def _ls_line(path: str, st: os.stat_result) -> str:
    return f"{fmtname(path)} {_file_type(st)} {st.st_ino} {st.st_size}"


def ls(path: str) -> List[str]:
    """Listing lines for a file, or for each entry of a directory.

    Raises OSError if ``path`` cannot be examined.
    """
    st = os.stat(path)
    kind = _file_type(st)
    if kind == T_FILE:
        return [_ls_line(path, st)]
    if kind != T_DIR:
        return []
    if len(path) + 1 + DIRSIZ + 1 > _LS_BUFSIZE:
        return ["ls: path too long"]
    lines = []
    for name in [".", ".."] + sorted(os.listdir(path)):
        full = f"{path}/{name}"
        try:
            entry = os.stat(full)
        except OSError:
            lines.append(f"ls: cannot stat {full}")
            continue
        lines.append(_ls_line(full, entry))
    return lines


def find(path: str, name: str) -> Iterator[str]:
    """Yield paths of regular files called ``name`` anywhere below ``path``."""
    try:
        entries = sorted(os.scandir(path), key=lambda e: e.name)
    except OSError:
        return
    for entry in entries:
        full = f"{path}/{entry.name}"
        if entry.is_dir(follow_symlinks=False):
            yield from find(full, name)
        elif entry.is_file() and entry.name == name:
            yield full


def primes(numbers: Iterable[int]) -> Iterator[int]:
    """Sieve ``numbers``: each stage passes on what its first number does not divide."""
    remaining = list(numbers)
    while remaining:
        prime, rest = remaining[0], remaining[1:]
        yield prime
        remaining = [n for n in rest if n % prime != 0]


def _args(argv: Optional[List[str]]) -> List[str]:
    return sys.argv[1:] if argv is None else list(argv)


def cat_main(argv: Optional[List[str]] = None) -> int:
    args = _args(argv)
    out = sys.stdout.buffer
    if not args:
        cat([sys.stdin.buffer], out)
        return 0
    for name in args:
        try:
            handle = open(name, "rb")
        except OSError:
            sys.stderr.write(f"cat: cannot open {name}\n")
            return 1
        with handle:
            cat([handle], out)
    out.flush()
    return 0


def echo_main(argv: Optional[List[str]] = None) -> int:
    sys.stdout.write(echo(_args(argv)))
    return 0


def _wc_report(data: bytes, name: str) -> None:
    counts = wc_counts(data)
    sys.stdout.write(f"{counts.lines} {counts.words} {counts.chars} {name}\n")


def wc_main(argv: Optional[List[str]] = None) -> int:
    args = _args(argv)
    if not args:
        _wc_report(sys.stdin.buffer.read(), "")
        return 0
    for name in args:
        try:
            handle = open(name, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {name}\n")
            return 1
        with handle:
            _wc_report(handle.read(), name)
    return 0


def ls_main(argv: Optional[List[str]] = None) -> int:
    for path in _args(argv) or ["."]:
        try:
            lines = ls(path)
        except OSError:
            sys.stderr.write(f"ls: cannot open {path}\n")
            continue
        for line in lines:
            sys.stdout.write(line + "\n")
    return 0


def find_main(argv: Optional[List[str]] = None) -> int:
    args = _args(argv)
    if len(args) < 2:
        sys.stdout.write("find <path> <name>\n")
        return 0
    for found in find(args[0], args[1]):
        sys.stdout.write(found + "\n")
    return 0


def primes_main(argv: Optional[List[str]] = None) -> int:
    for prime in primes(range(2, 36)):
        sys.stdout.write(f"prime {prime}\n")
    return 0