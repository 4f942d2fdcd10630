class ShortLinkError(Exception):
    """Base exception for all application-specific errors.

    Every subclass carries the HTTP status it maps to, so the boundary in
    ``shortlink.main`` can translate any of them without a lookup table.
    """

    error_code = 'app:shortlink_error'
    status_code = 500
    message = 'an unexpected error occurred'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


# --- Codec / token errors ---

class CodecError(ShortLinkError):
    """Base class for token encoding and request payload problems."""

    error_code = 'codec:codec_error'
    status_code = 400
    message = 'bad request'


class InvalidCharacterError(CodecError):
    """Raised when a token contains a character outside the alphabet."""

    error_code = 'codec:invalid_character_error'

    def __init__(self, char: str):
        self.char = char
        super().__init__(f"character {char!r} is not part of the token alphabet")


class ContentTypeInvalidError(CodecError):
    error_code = 'codec:content_type_invalid_error'
    status_code = 415
    message = 'incorrect content-type provided on request'


class PayloadTooLargeError(CodecError):
    error_code = 'codec:payload_too_large_error'
    status_code = 413
    message = 'request payload too large'


class ParseFailureError(CodecError):
    error_code = 'codec:parse_failure_error'
    message = 'unable to parse request payload'


class IdMissingError(CodecError):
    """Raised when a token is requested for a record that has no id yet."""

    error_code = 'codec:id_missing_error'
    status_code = 500
    message = 'attempted to access id, but was none value'


class TokenMissingError(CodecError):
    """Raised when the short link is requested before a token exists."""

    error_code = 'codec:token_missing_error'
    status_code = 500
    message = 'attempted to access an inaccessible token'


class TokenCollisionError(CodecError):
    """Raised when no unused token could be generated within the retry budget."""

    error_code = 'codec:token_collision_error'
    status_code = 500
    message = 'unable to generate a unique token'


# --- Repository errors ---

class RepositoryError(ShortLinkError):
    """Generic base class for persistence errors."""

    error_code = 'repo:repository_error'


class NotFoundError(RepositoryError):
    error_code = 'repo:not_found_error'
    status_code = 404
    message = 'not found'


class StoreUnavailableError(RepositoryError):
    """Raised when the data store cannot be reached or times out."""

    error_code = 'repo:store_unavailable_error'
    status_code = 503
    message = 'failed to connect to the database'


class InsertFailedError(RepositoryError):
    error_code = 'repo:insert_failed_error'
    message = 'an error occurred attempting to add a new share to the database'


class QueryFailedError(RepositoryError):
    error_code = 'repo:query_failed_error'
    message = 'an sql error occurred when interfacing with the database'


class MalformedRowError(QueryFailedError):
    """Raised when a stored row does not decode into a valid record."""

    error_code = 'repo:malformed_row_error'
    message = 'a stored row could not be decoded'


# --- Auth errors ---

class UnauthorizedError(ShortLinkError):
    error_code = 'auth:unauthorized_error'
    status_code = 401
    message = 'Unauthorized'


class InvalidCredentialsError(UnauthorizedError):
    error_code = 'auth:invalid_credentials_error'
    message = 'Invalid username or password'
