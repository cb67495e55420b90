from __future__ import annotations
from typing import Any


class PersistQueryError(Exception):
    """Base class for every failure raised while persisting a query."""


class ParseError(PersistQueryError):
    pass


class DuplicateTokenConfigError(PersistQueryError):
    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        super().__init__(
            f"Access token is already defined for operation={operation_name}"
        )


class MissingEnvironmentVariableError(PersistQueryError):
    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(
            f"Cannot persist query. Missing environment variable `{variable}`."
        )


class RemoteMutationError(PersistQueryError):
    """The persisted query service answered with an `errors` payload."""

    def __init__(self, errors: Any, serialized: str):
        self.errors = errors
        self.serialized = serialized
        super().__init__(f"Error persisting query, errors={serialized}")


class NetworkError(PersistQueryError):
    pass


class InvalidResponseError(PersistQueryError):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(f"{message} (status_code={status_code})")
