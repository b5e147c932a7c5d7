"""Pieces of a small teaching Unix: page tables, ELF headers, an allocator, a shell parser and user programs."""

__version__ = "0.1.0"