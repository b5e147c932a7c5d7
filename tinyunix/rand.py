"""The Park-Miller minimal standard pseudo-random generator."""

_U64 = (1 << 64) - 1


def do_rand(ctx: int) -> int:
    """Advance state ``ctx`` and return the new state, which is also the value.

    Computes (7^5 * x) mod (2^31 - 1) by Schrage's method; the result
    lies in [0, 0x7ffffffd].
    """
    x = ((ctx & _U64) % 0x7FFFFFFE) + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    return x - 1


class ParkMiller:
    """An endless stream of numbers from :func:`do_rand`."""

    def __init__(self, seed: int = 1):
        self.state = seed & _U64

    def next(self) -> int:
        """Return the next number and advance the state."""
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self) -> "ParkMiller":
        return self

    def __next__(self) -> int:
        return self.next()