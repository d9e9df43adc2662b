"""Error taxonomy shared by all Boardkeeper components."""


class BoardkeeperError(Exception):
    """Base exception for Boardkeeper errors."""

    category = "Error"


class ConfigurationMissingError(BoardkeeperError):
    """Required external setting is absent or malformed."""

    category = "ConfigurationMissing"


class TransportError(BoardkeeperError):
    """GitLab API request failed."""

    category = "TransportError"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DateParseError(BoardkeeperError):
    """Tracker data carried a malformed date string."""

    category = "ParseError"


class NotFoundError(BoardkeeperError):
    """Expected page or pipeline schedule does not exist."""

    category = "NotFound"
