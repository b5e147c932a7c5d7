"""A small printf supporting %d, %l, %x, %p, %s, %c and %%."""

import sys

_DIGITS = "0123456789ABCDEF"
_U32 = (1 << 32) - 1
_U64 = (1 << 64) - 1


def _int32(value: int) -> int:
    value &= _U32
    return value - (1 << 32) if value & 0x80000000 else value


def _printint(value: int, base: int, signed: bool) -> str:
    negative = signed and _int32(value) < 0
    x = -_int32(value) if negative else value & _U32
    digits = []
    while True:
        digits.append(_DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _printptr(value: int) -> str:
    return "0x" + format(value & _U64, "016X")


def format_string(fmt: str, *args) -> str:
    """Render ``fmt`` with ``args`` and return the text.

    Integers are 32 bits wide for %d, %l and %x; unknown conversions are
    copied through with their percent sign.
    """
    values = iter(args)

    def take():
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    out = []
    pending = False
    for c in fmt:
        if not pending:
            if c == "%":
                pending = True
            else:
                out.append(c)
            continue
        pending = False
        if c == "d":
            out.append(_printint(take(), 10, True))
        elif c == "l":
            out.append(_printint(take(), 10, False))
        elif c == "x":
            out.append(_printint(take(), 16, False))
        elif c == "p":
            out.append(_printptr(take()))
        elif c == "s":
            s = take()
            if s is None:
                out.append("(null)")
            elif isinstance(s, (bytes, bytearray)):
                out.append(bytes(s).decode("latin-1"))
            else:
                out.append(str(s))
        elif c == "c":
            ch = take()
            code = ord(ch) if isinstance(ch, str) else ch
            out.append(chr(code & 0xFF))
        elif c == "%":
            out.append("%")
        else:
            out.append("%" + c)
    return "".join(out)


def fprintf(stream, fmt: str, *args) -> None:
    """Write the formatted text to a text stream."""
    stream.write(format_string(fmt, *args))


def printf(fmt: str, *args) -> None:
    """Write the formatted text to standard output."""
    fprintf(sys.stdout, fmt, *args)