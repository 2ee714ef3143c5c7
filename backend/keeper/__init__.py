"""Secret Keeper: encrypted, per-owner storage for small typed secrets."""

__version__ = "1.0.0"
