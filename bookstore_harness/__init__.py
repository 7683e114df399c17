"""
End-to-end test harness for the bookstore book/category REST API.
"""

from .config import HarnessSettings
from .errors import HarnessError, TransportError, AuthenticationError
from .client import ApiClient, ApiResponse
from .auth import authenticate

__all__ = [
    "HarnessSettings",
    "HarnessError",
    "TransportError",
    "AuthenticationError",
    "ApiClient",
    "ApiResponse",
    "authenticate",
]
