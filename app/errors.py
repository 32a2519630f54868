"""
Search Errors
=============
ValidationError and CatalogUnavailable are the only errors surfaced to
callers of the search. SearchCancelled signals an aborted search (caller
cancellation or timeout).
"""


class ValidationError(ValueError):
    """
    One or more malformed query fields.

    Attributes:
        errors: dict mapping field name to a human-readable reason.
    """

    def __init__(self, errors):
        self.errors = dict(errors)
        fields = ', '.join(sorted(self.errors))
        super().__init__(f"Invalid search parameters: {fields}")


class CatalogUnavailable(RuntimeError):
    """The external store/medicine collaborator could not supply the catalog."""


class SearchCancelled(RuntimeError):
    """The search was aborted between store evaluations."""
