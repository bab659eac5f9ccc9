"""
Exception classes for media-resolver.

This module defines all custom exceptions used throughout the application.
Each exception names one failure mode so that callers can tell a broken
page layout apart from a bad URL or a dead network.

Exception Hierarchy:
    MediaResolverError (base)
        ParseError - Response JSON does not have the expected shape
        ConfigError - Missing credential, bad option or bad config file
        ValidationError - URL or response kind outside what we handle
        NetworkError - Transport failure or non-2xx HTTP status
        StateError - Operation applied to the wrong kind of object
"""


class MediaResolverError(Exception):
    """
    Base exception for all media-resolver errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every media-resolver error with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., URL, JSON path).

    Example:
        try:
            results = parse_search_results(html)
        except MediaResolverError as e:
            logger.error(f"Search failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'url': URL that caused the error
                     - 'path': JSON path that could not be resolved
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ParseError(MediaResolverError):
    """
    Raised when scraped HTML or API JSON does not have the expected shape.

    Inside a search results walk a ParseError for a single entry is
    recoverable (the entry is skipped). Anywhere else it aborts the call.

    Common causes:
        - Empty HTML body
        - The ytInitialData marker is missing (layout change, consent page)
        - A required key is missing from a renderer or API object
        - The response body is not valid JSON

    Example:
        raise ParseError(
            "Missing required field 'videoRenderer.videoId'",
            details={'path': 'videoRenderer.videoId'}
        )
    """
    pass


class ConfigError(MediaResolverError):
    """
    Raised for configuration problems, including a missing credential.

    This is a CRITICAL error that should stop the current operation.

    Common causes:
        - No SoundCloud client_id has been loaded
        - Unknown search type or negative limit
        - config.yaml has invalid YAML syntax or invalid values
        - The credential data file is corrupted

    Example:
        raise ConfigError(
            "SoundCloud client_id is missing. Run 'media-resolver authorize' first.",
            details={'data_file': '.data/soundcloud.data'}
        )
    """
    pass


class ValidationError(MediaResolverError):
    """
    Raised when an input or a response is outside the supported scope.

    Common causes:
        - URL is not a SoundCloud URL
        - Resolve endpoint answered with a kind other than track/playlist
        - YouTube served a captcha page instead of search results

    Example:
        raise ValidationError(
            "This URL is out of scope: resolved kind is 'user'",
            details={'url': url, 'kind': 'user'}
        )
    """
    pass


class NetworkError(MediaResolverError):
    """
    Raised when an HTTP request fails.

    Nothing in this project retries; the error propagates to the caller
    unchanged (the credential probe is the only place that catches it).

    Attributes:
        url: The URL that was requested.
        status_code: HTTP status code, or None for transport failures
                     (DNS, connection refused, timeout).

    Example:
        raise NetworkError(
            "GET https://api-v2.soundcloud.com/resolve failed with HTTP 401",
            url="https://api-v2.soundcloud.com/resolve",
            status_code=401
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        url: str | None = None,
        status_code: int | None = None
    ) -> None:
        """
        Initialize network error with request context.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            url: The URL that was requested.
            status_code: HTTP status code if a response was received.
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class StateError(MediaResolverError):
    """
    Raised when an operation is applied to an object that cannot support it.

    Common causes:
        - Asking for a stream from a playlist URL
        - Asking for a stream from a track that lists no formats

    Example:
        raise StateError(
            "Streams can't be created from a playlist URL",
            details={'url': url}
        )
    """
    pass
