# tinyunix

Pieces of a small teaching Unix, written as plain Python you can read,
run and test.

## Modules

- **`tinyunix.layout`** – system parameters (`NPROC`, `MAXARG`, `MAXPATH`,
  ...), `open()` flags (`O_RDONLY`, `O_WRONLY`, `O_RDWR`, `O_CREATE`,
  `O_TRUNC`), RISC-V status and interrupt bits, and the Sv39 page-table
  arithmetic: `pg_round_up`, `pg_round_down`, `pa_to_pte`, `pte_to_pa`,
  `pte_flags`, `px`, `make_satp`, plus the memory-layout helpers `kstack`,
  `clint_mtimecmp`, `plic_senable`, `plic_spriority` and `plic_sclaim`.
- **`tinyunix.elf`** – reading and writing ELF64 file and program headers
  (`ElfHeader`, `ProgramHeader`, `program_headers`). A bad magic number or
  short input raises `ElfFormatError`.
- **`tinyunix.vm`** – a simulated physical memory (`PhysicalMemory`) and
  three-level Sv39 page tables (`PageTable`) with `walk`, `walkaddr`,
  `map_pages`, `unmap`, `init_user`, `grow`, `shrink`, `free`, `copy_to`,
  `clear_user`, `copy_out`, `copy_in` and `copy_in_str`. Broken invariants
  raise `VmPanic`, unmapped user addresses raise `VmFault`, and running out
  of pages raises `MemoryError`. `kernel_pagetable` builds the kernel's
  direct-mapped table.
- **`tinyunix.umalloc`** – a next-fit free-list allocator (`Allocator`)
  with `malloc`, `free` and `free_blocks`, growing its heap through a
  simulated `sbrk` up to a byte limit; going past the limit raises
  `MemoryError`.
- **`tinyunix.fmt`** – a minimal printf family (`format_string`,
  `fprintf`, `printf`) understanding `%d %l %x %p %s %c %%`.
- **`tinyunix.ulib`** – `atoi`, `strcmp`, `memcmp` and `gets` with their
  C library semantics.
- **`tinyunix.rand`** – the Park–Miller minimal standard generator
  (`do_rand`, and the iterator `ParkMiller`).
- **`tinyunix.grep`** – `match` for a tiny regular-expression language
  (`^ . * $` and literals) and `grep`, which yields matching lines.
- **`tinyunix.shell`** – `parse_command`, which turns a command line into
  a tree of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd`;
  bad input raises `ShellSyntaxError`.
- **`tinyunix.coreutils`** – `cat`, `echo`, `wc_counts`, `fmtname`, `ls`,
  `find` and the `primes` sieve.

## Installation

```
pip install .
```

Python 3.10 or later; there are no runtime dependencies.

## Using it from Python

```python
from tinyunix.fmt import format_string
from tinyunix.grep import match
from tinyunix.layout import pg_round_up
from tinyunix.rand import ParkMiller
from tinyunix.shell import parse_command
from tinyunix.vm import PhysicalMemory, PageTable

format_string("%d apples and %s\n", 3, "pears")
match("^a.*b$", "axxb")
pg_round_up(4097)

rng = ParkMiller(1)
first = rng.next()

tree = parse_command("echo hi | cat > out")

memory = PhysicalMemory(64, 0x80000000)
table = PageTable.create(memory)
size = table.grow(0, 8192)
table.copy_out(100, b"hello")
table.copy_in(100, 5)
```

## Commands

Each user program is installed as a command working on the host's files:

```
tinyunix-cat [FILE...]
tinyunix-echo [WORD...]
tinyunix-wc [FILE...]
tinyunix-ls [PATH...]
tinyunix-find PATH NAME
tinyunix-grep PATTERN [FILE...]
tinyunix-primes
```

With no file arguments, `tinyunix-cat`, `tinyunix-wc` and `tinyunix-grep`
read standard input. `tinyunix-primes` prints the primes from 2 to 35.

## What it does not do

There is no running system here: no processes, scheduler, system calls,
traps or file system. The shell module only parses command lines; it does
not run them, and there is no interactive shell command. The page tables
and allocator work on simulated memory only.

## Running the tests

```
pip install .[test]
pytest
```