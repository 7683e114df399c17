class HarnessError(Exception):
    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransportError(HarnessError):
    """The request never produced an HTTP response (connection refused, timeout...)."""

    def __init__(self, method, url, cause):
        super().__init__(
            message=f"{method} {url} failed: {cause}",
            details={"method": method, "url": url, "cause": repr(cause)}
        )


class AuthenticationError(HarnessError):
    def __init__(self, reason, status_code=None):
        super().__init__(
            message=f"Authentication failed: {reason}",
            details={"status_code": status_code}
        )
        self.status_code = status_code
