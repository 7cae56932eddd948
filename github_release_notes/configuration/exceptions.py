"""Contains exceptions raised when reconciling application configuration."""


class GitHubAuthenticationConfigurationUndefinedError(Exception):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class ConflictingFilterOptionsError(Exception):
    """Raised when command line options describe more than one release filter."""

    def __init__(self, filter_types: list[str]) -> None:
        """Initializes the exception with the filter types that were requested together."""
        super().__init__(f"Only one release filter may be used at a time, got: {', '.join(filter_types)}")
        self.filter_types = filter_types
