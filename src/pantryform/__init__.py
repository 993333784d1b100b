"""pantryform — pet pantry intake form automation."""

__version__ = "0.1.0"
