"""Sv39 page tables built in a simulated physical memory."""

import struct
from typing import List, Optional

from .layout import (
    KERNBASE,
    MAXVA,
    PGSIZE,
    PHYSTOP,
    PLIC,
    PTE_R,
    PTE_U,
    PTE_V,
    PTE_W,
    PTE_X,
    TRAMPOLINE,
    UART0,
    VIRTIO0,
    pa_to_pte,
    pg_round_down,
    pg_round_up,
    pte_flags,
    pte_to_pa,
    px,
)

_U64 = (1 << 64) - 1
_WORD = struct.Struct("<Q")
PTES_PER_PAGE = PGSIZE // _WORD.size


class VmPanic(RuntimeError):
    """An invariant of the virtual-memory code was broken."""


class VmFault(Exception):
    """A user or physical address could not be accessed."""


class PhysicalMemory:
    """A run of page frames starting at physical address ``base``."""

    def __init__(self, npages: int, base: int = KERNBASE):
        if npages <= 0:
            raise ValueError("physical memory needs at least one page")
        if base % PGSIZE:
            raise ValueError(f"base {base:#x} is not page aligned")
        self.base = base
        self.npages = npages
        self._data = bytearray(npages * PGSIZE)
        # Freed pages are pushed on top; the highest page is handed out first.
        self._free: List[int] = [base + i * PGSIZE for i in range(npages)]
        self._free_set = set(self._free)

    def alloc(self) -> Optional[int]:
        """Take a free page and return its address, or None if none is left."""
        if not self._free:
            return None
        pa = self._free.pop()
        self._free_set.discard(pa)
        return pa

    def free(self, pa: int) -> None:
        """Return the page at ``pa`` to the free pool."""
        end = self.base + self.npages * PGSIZE
        if pa % PGSIZE or not self.base <= pa < end:
            raise VmPanic("kfree")
        if pa in self._free_set:
            raise VmPanic("kfree: page already free")
        self._free.append(pa)
        self._free_set.add(pa)

    def _offset(self, pa: int, n: int) -> int:
        offset = pa - self.base
        if offset < 0 or n < 0 or offset + n > len(self._data):
            raise VmFault(f"physical address {pa:#x} (+{n}) outside memory")
        return offset

    def read(self, pa: int, n: int) -> bytes:
        """Return ``n`` bytes starting at ``pa``."""
        offset = self._offset(pa, n)
        return bytes(self._data[offset:offset + n])

    def write(self, pa: int, data) -> None:
        """Store ``data`` starting at ``pa``."""
        offset = self._offset(pa, len(data))
        self._data[offset:offset + len(data)] = data

    def read_u64(self, pa: int) -> int:
        """Read a little-endian 64-bit word."""
        return _WORD.unpack_from(self._data, self._offset(pa, _WORD.size))[0]

    def write_u64(self, pa: int, value: int) -> None:
        """Write a little-endian 64-bit word."""
        _WORD.pack_into(self._data, self._offset(pa, _WORD.size), value & _U64)

    def free_pages(self) -> int:
        """Number of pages currently free."""
        return len(self._free)

    def _zero_page(self, pa: int) -> None:
        self.write(pa, bytes(PGSIZE))


class PageTable:
    """A three-level Sv39 page table whose root page lives at ``root``."""

    def __init__(self, memory: PhysicalMemory, root: int):
        self.memory = memory
        self.root = root

    @classmethod
    def create(cls, memory: PhysicalMemory) -> "PageTable":
        """Allocate an empty page table."""
        root = memory.alloc()
        if root is None:
            raise MemoryError("no free page for a page table")
        memory._zero_page(root)
        return cls(memory, root)

    def walk(self, va: int, alloc: bool = False) -> Optional[int]:
        """Return the physical address of the level-0 PTE for ``va``.

        Missing intermediate tables are created when ``alloc`` is true;
        otherwise, or when memory runs out, None is returned.
        """
        if va < 0 or va >= MAXVA:
            raise VmPanic("walk")
        table = self.root
        for level in (2, 1):
            pte_addr = table + 8 * px(level, va)
            pte = self.memory.read_u64(pte_addr)
            if pte & PTE_V:
                table = pte_to_pa(pte)
                continue
            if not alloc:
                return None
            table = self.memory.alloc()
            if table is None:
                return None
            self.memory._zero_page(table)
            self.memory.write_u64(pte_addr, pa_to_pte(table) | PTE_V)
        return table + 8 * px(0, va)

    def walkaddr(self, va: int) -> Optional[int]:
        """Physical page behind a user virtual address, or None if unmapped."""
        if va < 0 or va >= MAXVA:
            return None
        pte_addr = self.walk(va, False)
        if pte_addr is None:
            return None
        pte = self.memory.read_u64(pte_addr)
        if not pte & PTE_V or not pte & PTE_U:
            return None
        return pte_to_pa(pte)

    def map_pages(self, va: int, size: int, pa: int, perm: int) -> None:
        """Map the pages covering [va, va+size) to physical memory from ``pa``."""
        if size == 0:
            raise VmPanic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            pte_addr = self.walk(a, True)
            if pte_addr is None:
                raise MemoryError("no free page for a page-table page")
            if self.memory.read_u64(pte_addr) & PTE_V:
                raise VmPanic("mappages: remap")
            self.memory.write_u64(pte_addr, pa_to_pte(pa) | perm | PTE_V)
            if a == last:
                break
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va: int, npages: int, do_free: bool) -> None:
        """Remove ``npages`` existing mappings from ``va``, optionally freeing them."""
        if va % PGSIZE:
            raise VmPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            pte_addr = self.walk(a, False)
            if pte_addr is None:
                raise VmPanic("uvmunmap: walk")
            pte = self.memory.read_u64(pte_addr)
            if not pte & PTE_V:
                raise VmPanic("uvmunmap: not mapped")
            if pte_flags(pte) == PTE_V:
                raise VmPanic("uvmunmap: not a leaf")
            if do_free:
                self.memory.free(pte_to_pa(pte))
            self.memory.write_u64(pte_addr, 0)

    def init_user(self, src: bytes) -> None:
        """Load ``src`` (less than a page) at address 0 of a new process."""
        if len(src) >= PGSIZE:
            raise VmPanic("inituvm: more than a page")
        mem = self.memory.alloc()
        if mem is None:
            raise MemoryError("no free page for initial user memory")
        self.memory._zero_page(mem)
        self.map_pages(0, PGSIZE, mem, PTE_W | PTE_R | PTE_X | PTE_U)
        self.memory.write(mem, src)

    def grow(self, oldsz: int, newsz: int) -> int:
        """Allocate zeroed user pages to grow from ``oldsz`` to ``newsz``."""
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            mem = self.memory.alloc()
            if mem is None:
                self.shrink(a, oldsz)
                raise MemoryError("out of physical memory")
            self.memory._zero_page(mem)
            try:
                self.map_pages(a, PGSIZE, mem, PTE_W | PTE_X | PTE_R | PTE_U)
            except MemoryError:
                self.memory.free(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz: int, newsz: int) -> int:
        """Free user pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        top, bottom = pg_round_up(oldsz), pg_round_up(newsz)
        if bottom < top:
            self.unmap(bottom, (top - bottom) // PGSIZE, True)
        return newsz

    def _free_table(self, table: int) -> None:
        page = self.memory.read(table, PGSIZE)
        for index, (pte,) in enumerate(_WORD.iter_unpack(page)):
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._free_table(pte_to_pa(pte))
                self.memory.write_u64(table + 8 * index, 0)
            elif pte & PTE_V:
                raise VmPanic("freewalk: leaf")
        self.memory.free(table)

    def free_walk(self) -> None:
        """Free every page-table page; all leaf mappings must be gone."""
        self._free_table(self.root)

    def free(self, sz: int) -> None:
        """Free ``sz`` bytes of user memory, then the page table itself."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self.free_walk()

    def copy_to(self, other: "PageTable", sz: int) -> None:
        """Copy the first ``sz`` bytes of user memory, pages and flags, into ``other``."""
        for i in range(0, sz, PGSIZE):
            pte_addr = self.walk(i, False)
            if pte_addr is None:
                raise VmPanic("uvmcopy: pte should exist")
            pte = self.memory.read_u64(pte_addr)
            if not pte & PTE_V:
                raise VmPanic("uvmcopy: page not present")
            mem = other.memory.alloc()
            if mem is None:
                other.unmap(0, i // PGSIZE, True)
                raise MemoryError("out of physical memory")
            other.memory.write(mem, self.memory.read(pte_to_pa(pte), PGSIZE))
            try:
                other.map_pages(i, PGSIZE, mem, pte_flags(pte))
            except MemoryError:
                other.memory.free(mem)
                other.unmap(0, i // PGSIZE, True)
                raise

    def clear_user(self, va: int) -> None:
        """Make the page at ``va`` inaccessible to user mode."""
        pte_addr = self.walk(va, False)
        if pte_addr is None:
            raise VmPanic("uvmclear")
        self.memory.write_u64(pte_addr, self.memory.read_u64(pte_addr) & ~PTE_U)

    def _user_page(self, va0: int) -> int:
        pa0 = self.walkaddr(va0)
        if pa0 is None:
            raise VmFault(f"user address {va0:#x} is not mapped")
        return pa0

    def copy_out(self, dstva: int, data) -> None:
        """Copy ``data`` to user virtual address ``dstva``."""
        view = memoryview(bytes(data))
        pos = 0
        while pos < len(view):
            va0 = pg_round_down(dstva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (dstva - va0), len(view) - pos)
            self.memory.write(pa0 + (dstva - va0), view[pos:pos + n])
            pos += n
            dstva = va0 + PGSIZE

    def copy_in(self, srcva: int, length: int) -> bytes:
        """Copy ``length`` bytes from user virtual address ``srcva``."""
        chunks = []
        while length > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (srcva - va0), length)
            chunks.append(self.memory.read(pa0 + (srcva - va0), n))
            length -= n
            srcva = va0 + PGSIZE
        return b"".join(chunks)

    def copy_in_str(self, srcva: int, maximum: int) -> bytes:
        """Copy a NUL-terminated string of at most ``maximum`` bytes, NUL included."""
        out = bytearray()
        while maximum > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (srcva - va0), maximum)
            chunk = self.memory.read(pa0 + (srcva - va0), n)
            nul = chunk.find(0)
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            maximum -= n
            srcva = va0 + PGSIZE
        raise VmFault("string is not NUL-terminated within the limit")


def kernel_pagetable(memory: PhysicalMemory, etext: int, trampoline: int) -> PageTable:
    """Build the kernel's direct-mapped page table.

    ``etext`` is the end of kernel text and ``trampoline`` the physical
    address of the trap trampoline page.
    """
    table = PageTable.create(memory)

    def kvmmap(va: int, pa: int, sz: int, perm: int) -> None:
        try:
            table.map_pages(va, sz, pa, perm)
        except MemoryError as exc:
            raise VmPanic("kvmmap") from exc

    kvmmap(UART0, UART0, PGSIZE, PTE_R | PTE_W)
    kvmmap(VIRTIO0, VIRTIO0, PGSIZE, PTE_R | PTE_W)
    kvmmap(PLIC, PLIC, 0x400000, PTE_R | PTE_W)
    kvmmap(KERNBASE, KERNBASE, etext - KERNBASE, PTE_R | PTE_X)
    kvmmap(etext, etext, PHYSTOP - etext, PTE_R | PTE_W)
    kvmmap(TRAMPOLINE, trampoline, PGSIZE, PTE_R | PTE_X)
    return table