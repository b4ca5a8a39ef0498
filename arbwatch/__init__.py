"""arbwatch: two-venue DEX round-trip opportunity watcher."""

__version__ = "0.1.0"
