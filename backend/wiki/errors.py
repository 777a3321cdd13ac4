class WikiError(Exception):
    """Base class for every error raised by the wiki core."""


class Conflict(WikiError):
    pass


class NotFound(WikiError):
    pass


class InvalidTitle(WikiError):
    pass


class AuthenticationFailed(WikiError):
    pass


class StorageFailure(WikiError):
    """The underlying database could not complete the operation."""


class BackupFailure(WikiError):
    """A backup sink could not mirror an article.

    Never surfaced as the result of a core operation.
    """
