"""Runner managers, context pools, byte buffer pools and configuration normalisation."""

__version__ = "0.1.0"
__all__ = ["byteslicepool", "closer", "context", "normalize", "runner"]