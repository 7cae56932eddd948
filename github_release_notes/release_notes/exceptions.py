"""Exceptions raised by the release notes workspace."""


class FilterNotUsableError(Exception):
    """Raised when a release filter is missing the fields its type requires."""

    def __init__(self, filter_type: str) -> None:
        """Initializes the exception with the type of the incomplete filter."""
        super().__init__(f"The {filter_type} filter is missing required fields")
        self.filter_type = filter_type


class ReleaseItemsFetchError(Exception):
    """Raised when fetching release items fails as a whole, e.g. expired credentials."""

    pass


class WorkspaceNotOpenError(Exception):
    """Raised when a workspace operation needs repository data that was not loaded."""

    pass
