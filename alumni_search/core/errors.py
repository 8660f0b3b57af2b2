"""Exceptions raised by the search core and its collaborators."""


class AlumniSearchError(Exception):
    """Base class for search-core errors."""


class StoreUnavailableError(AlumniSearchError):
    """The profile store could not answer a query (recovered per plan)."""


class OracleUnavailableError(AlumniSearchError):
    """The natural-language oracle failed (recovered by rule-based fallback)."""
