"""hafrag — HAProxy configuration fragment assembler."""

__version__ = "0.1.0"
