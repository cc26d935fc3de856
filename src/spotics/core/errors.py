# src/spotics/core/errors.py
from __future__ import annotations


class SpoticsError(Exception):
    """Base application error for spotics.

    Use this for predictable, user-facing error messages that should be
    caught by the CLI and displayed nicely.
    """

    pass


class StoreNotReadable(SpoticsError):
    """A store file exists but could not be read."""

    def __init__(self, path, reason: str = "") -> None:
        self.path = path
        msg = f"Failed to read {path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class InvalidFormat(StoreNotReadable):
    """A store file exists but its content does not have the expected shape."""

    def __init__(self, path, reason: str = "") -> None:
        super().__init__(path, reason or "invalid format")


class CredentialsMissing(SpoticsError):
    def __init__(self, *fields: str) -> None:
        self.fields = fields
        super().__init__(
            "Missing credentials: "
            + ", ".join(fields)
            + ". Run `spotics config credentials` or set SPOTICS_* environment variables."
        )


class ProviderError(SpoticsError):
    """An error attributed to one provider."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(message)


class InvalidToken(ProviderError):
    """The provider rejected the credentials or issued an unusable session."""


class MalformedResponse(ProviderError):
    """Success status, but the body does not have the expected shape."""


class TransportFailure(ProviderError):
    """Network-level failure (connection, DNS, timeout)."""


class ApiError(ProviderError):
    def __init__(self, provider: str, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(provider, f"API returned status {status}: {body}")


class SessionAcquisitionError(SpoticsError):
    """One or more providers failed to produce a session.

    ``errors`` maps provider name to the exception raised by its branch.
    """

    def __init__(self, errors: dict[str, BaseException]) -> None:
        self.errors = dict(errors)
        detail = "; ".join(f"{name}: {exc}" for name, exc in self.errors.items())
        super().__init__(f"Failed to acquire sessions ({detail})")
