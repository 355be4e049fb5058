"""Output naming conventions."""

from .naming_convention import FILENAME_PREFIXES, canonicalize_name, standardized_filename

__all__ = ["FILENAME_PREFIXES", "canonicalize_name", "standardized_filename"]
