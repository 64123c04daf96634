# classvote/errors.py
# Error taxonomy shared by storage, services and the HTTP layer


class VotingError(Exception):
    """Base class for every error the service reports to a caller."""

    status_code = 500


class ValidationError(VotingError):
    status_code = 400


class InvalidNameError(ValidationError):
    pass


class DuplicateVoteError(VotingError):
    status_code = 400

    def __init__(self, message: str = "This name has already been used to vote"):
        super().__init__(message)


class StorageError(VotingError):
    status_code = 500


class DuplicateError(StorageError):
    """A unique index rejected the write."""
