"""C-string helpers used by the user programs."""

from itertools import zip_longest
from typing import AnyStr, IO, Union

_Text = Union[str, bytes, bytearray]


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _cstring(s: _Text) -> bytes:
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    return data.split(b"\0", 1)[0]


def atoi(s: _Text) -> int:
    """Parse leading decimal digits; no sign or blanks. Wraps to 32 bits."""
    if isinstance(s, (bytes, bytearray)):
        s = bytes(s).decode("latin-1")
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + ord(ch) - ord("0")
    return _int32(n)


def strcmp(p: _Text, q: _Text) -> int:
    """Compare two strings bytewise; negative, zero or positive."""
    for a, b in zip_longest(_cstring(p), _cstring(q), fillvalue=0):
        if a == 0 or a != b:
            return a - b
    return 0


def memcmp(a: bytes, b: bytes, n: int) -> int:
    """Compare the first ``n`` bytes of ``a`` and ``b``."""
    if len(a) < n or len(b) < n:
        raise ValueError(f"memcmp needs {n} bytes in each operand")
    for x, y in zip(a[:n], b[:n]):
        if x != y:
            return x - y
    return 0


def gets(stream: IO[AnyStr], maximum: int) -> AnyStr:
    """Read up to ``maximum - 1`` characters, stopping after a newline or CR."""
    chunks = []
    while len(chunks) + 1 < maximum:
        c = stream.read(1)
        if not c:
            break
        chunks.append(c)
        if c in ("\n", "\r", b"\n", b"\r"):
            break
    return stream.read(0)[:0].join(chunks) if chunks else stream.read(0)