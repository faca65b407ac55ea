"""Domain layer — catalog records and the pure algorithms over them.

Nothing in this package performs I/O. Every function receives an
in-memory snapshot of the catalog and returns derived, read-only data.
"""
