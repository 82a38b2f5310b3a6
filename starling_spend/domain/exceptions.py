"""Domain-specific exceptions"""


class StarlingSpendError(Exception):
    """Base exception for the client and analysis layers"""

    pass


class ConfigurationError(StarlingSpendError):
    """Required configuration is missing or invalid"""

    pass


class TransportError(StarlingSpendError):
    """Bank API could not be reached, timed out, or returned a non-2xx status"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(StarlingSpendError):
    """Bank API rejected the access token (HTTP 401/403)"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(StarlingSpendError):
    """Response body is not valid JSON or does not match the entity shape"""

    def __init__(self, message: str, fields: tuple[str, ...] = ()):
        if fields:
            message = f"{message}: {', '.join(fields)}"
        super().__init__(message)
        self.fields = fields


class UnderdeterminedFitError(StarlingSpendError):
    """Not enough distinct points for the requested polynomial degree"""

    pass
