"""
exceptions.py
-------------
Error taxonomy shared by every layer.

Callers only ever see these types: the repository translates driver
errors into ``RepositoryError`` before they leave the data-access layer.
"""


class ConfigurationError(Exception):
    """Missing or invalid configuration. Fatal at startup."""


class RepositoryError(Exception):
    """
    A store failure during a repository call.

    Attributes:
        operation: Name of the repository operation that failed.
        cause: The original driver exception.
    """

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Repository operation '{operation}' failed: {cause}")


class MappingError(ValueError):
    """A result row (or a declared statement) does not match its mapping table."""
