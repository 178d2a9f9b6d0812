"""banksync - Bankin to document store synchronization."""

__version__ = "0.1.0"
