"""cryptnotes - password-encrypted personal notes sorted by date."""

__version__ = "0.1.0"
