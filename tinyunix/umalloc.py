"""A next-fit free-list allocator over a simulated program break."""

import bisect
from typing import Dict, List, Tuple

HEADER_SIZE = 16  # a block header: next pointer and size, padded to alignment
MIN_GROWTH_UNITS = 4096  # the heap grows by at least this many headers

# The list head sits below every heap address and has size zero.
_BASE = -1


class Allocator:
    """malloc and free over a heap that grows through :meth:`sbrk` up to ``limit`` bytes.

    Sizes are counted in header-sized units; every block starts with a
    header and the address handed out is the byte just after it.
    """

    def __init__(self, limit: int):
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        self.brk = 0
        self._starts: List[int] = []
        self._units: Dict[int, int] = {}
        self._rover = None
        self._allocated: Dict[int, int] = {}

    def sbrk(self, n: int) -> int:
        """Move the break by ``n`` bytes and return its old position."""
        old = self.brk
        new = old + n
        if new < 0 or new > self.limit:
            raise MemoryError(f"cannot move break from {old} by {n}")
        self.brk = new
        return old

    def _successor(self, addr: int) -> int:
        index = bisect.bisect_right(self._starts, addr)
        return self._starts[index % len(self._starts)]

    def _release(self, bp: int, units: int) -> None:
        index = bisect.bisect_left(self._starts, bp)
        if index < len(self._starts) and self._starts[index] == bp:
            raise ValueError(f"block at {bp:#x} is already free")
        prev = self._starts[index - 1]
        following = self._starts[index % len(self._starts)]
        if bp + units * HEADER_SIZE == following:
            units += self._units.pop(following)
            del self._starts[index]
        if prev + self._units[prev] * HEADER_SIZE == bp:
            self._units[prev] += units
        else:
            self._starts.insert(index, bp)
            self._units[bp] = units
        self._rover = prev

    def free(self, address: int) -> None:
        """Return a block obtained from :meth:`malloc`."""
        units = self._allocated.pop(address, None)
        if units is None:
            raise ValueError(f"{address:#x} is not an allocated block")
        self._release(address - HEADER_SIZE, units)

    def _morecore(self, nunits: int) -> int:
        nunits = max(nunits, MIN_GROWTH_UNITS)
        header = self.sbrk(nunits * HEADER_SIZE)
        self._allocated[header + HEADER_SIZE] = nunits
        self.free(header + HEADER_SIZE)
        return self._rover

    def malloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` and return the address of the block."""
        if nbytes < 0:
            raise ValueError("size must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._rover is None:
            self._starts = [_BASE]
            self._units = {_BASE: 0}
            self._rover = _BASE
        prev = self._rover
        p = self._successor(prev)
        while True:
            size = self._units[p]
            if size >= nunits:
                if size == nunits:
                    del self._units[p]
                    self._starts.remove(p)
                else:
                    self._units[p] = size - nunits
                    p += (size - nunits) * HEADER_SIZE
                self._rover = prev
                address = p + HEADER_SIZE
                self._allocated[address] = nunits
                return address
            if p == self._rover:
                p = self._morecore(nunits)
            prev, p = p, self._successor(p)

    def free_blocks(self) -> List[Tuple[int, int]]:
        """Free blocks as (header address, size in bytes), in address order."""
        return [
            (start, self._units[start] * HEADER_SIZE)
            for start in self._starts
            if start != _BASE
        ]