"""Error types raised while configuring or running fault injection."""

from __future__ import annotations


class FaultConfigError(ValueError):
    """Raised when a Fault or Injector is built with invalid options."""

    def __init__(self, message: str, error_type: str = "invalid_option"):
        self.error_type = error_type
        super().__init__(message)


class NilInjectorError(FaultConfigError):
    """Raised when a required injector is missing."""

    def __init__(self, index: int | None = None):
        self.index = index
        if index is None:
            message = "injector cannot be None"
        else:
            message = f"injector at index {index} cannot be None"
        super().__init__(message, "nil_injector")


class InvalidParticipationError(FaultConfigError):
    """Raised when participation is outside 0.0 <= participation <= 1.0."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"participation must be 0.0 <= participation <= 1.0, got {value!r}",
            "invalid_participation",
        )


class InvalidStatusCodeError(FaultConfigError):
    """Raised when an ErrorInjector is given an unknown HTTP status code."""

    def __init__(self, status_code: object):
        self.status_code = status_code
        super().__init__(f"{status_code!r} is not a valid http status code", "invalid_status_code")


class EmptyInjectorListError(FaultConfigError):
    """Raised when a composite injector that requires members is given none."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"{kind} requires at least one injector", "empty_injector_list")


class RequestAborted(Exception):
    """Signals a deliberately dropped connection.

    RejectInjector raises this instead of writing a response. It is not a bug in
    the application and servers or middleware should not report it as one.
    """

    def __init__(self, message: str = "request aborted by fault injection"):
        super().__init__(message)
