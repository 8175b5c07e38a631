"""Infrastructure-specific exceptions for the UniScout application."""


class InfrastructureException(Exception):  # noqa: N818
    """Base exception for all infrastructure-related errors."""

    pass


class ConfigurationError(InfrastructureException):
    """Raised when there's a configuration issue.

    Configuration errors are fatal: they are raised at startup and are
    never caught by the request path.
    """

    pass
