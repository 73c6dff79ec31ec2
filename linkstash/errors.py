"""Exceptions raised by the link store and session layer.

Classes:
    LinkStashError:
        Generic base class for linkstash exceptions.

    StorageError:
        The storage backend failed (I/O, lock timeout, connection loss).

    MappingNotFoundError:
        No mapping exists for the requested short identifier.

    UnauthorizedError:
        The caller's session token is missing, unknown, revoked or expired.

    InvalidCredentialsError:
        A login attempt did not match the configured admin credentials.

    RandomSourceError:
        The operating system's entropy source failed while minting a token.
"""


class LinkStashError(Exception):
    """Generic base class for linkstash exceptions."""

    pass


class StorageError(LinkStashError):
    """Exception raised when the storage backend fails.

    e.g. disk I/O errors, busy/lock timeouts, lost database connections.
    """

    pass


class MappingNotFoundError(LinkStashError):
    """Exception raised when a short identifier has no stored mapping."""

    def __init__(self, identifier: str):
        super().__init__(f"Short identifier '{identifier}' not found")
        self.identifier = identifier


class UnauthorizedError(LinkStashError):
    """Exception raised when a session token does not grant access."""

    pass


class InvalidCredentialsError(LinkStashError):
    """Exception raised when a login does not match the admin credentials."""

    pass


class RandomSourceError(LinkStashError):
    """Exception raised when no secure random bytes could be obtained."""

    pass
