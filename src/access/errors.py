"""
src/access/errors.py
"""


class ValidationError(ValueError):
    """A code or custom-role entry failed validation. Nothing was written."""


class StoreCorruptError(ValueError):
    """A persisted value could not be read back into its expected shape."""
