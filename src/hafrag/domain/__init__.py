"""Domain layer — pure types, order keys, and declaration models.

Nothing in this package performs I/O.
"""
