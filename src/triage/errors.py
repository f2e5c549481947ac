"""Exception taxonomy for the triage tool.

Every failure path ends in one of these so the front-end can print a
message and return to the prompt.
"""

from __future__ import annotations


class TriageError(Exception):
    """Base class for every recoverable triage failure."""


class CsvValidationError(TriageError, ValueError):
    """An uploaded file was rejected before any row was processed."""


class WrongExtensionError(CsvValidationError):
    """The uploaded file does not carry a ``.csv`` extension."""


class InsufficientRowsError(CsvValidationError):
    """The file is empty or holds a header without data rows."""


class LoadError(TriageError):
    """A chunk or metadata document could not be fetched."""


class ExportError(TriageError):
    """The annotated dataset could not be written to disk."""
