"""Client-side virtual filesystem and view resolution for a drive library."""

__version__ = "0.1.0"
