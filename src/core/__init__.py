"""
Core value types, numerical primitives, errors and contracts.

Everything here is pure and synchronous: no I/O, no shared mutable state.
"""
