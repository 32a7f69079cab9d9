"""
Base API
Common contract of every module query accessor
"""

from core.errors import TransportError
from ..api_requester import APIRequester


class BaseAPI:
    """
    Module accessor bound to the client's shared requester

    Accessors hold no transport state of their own; every call goes through
    ``self.requester``.
    """

    name = ''

    def __init__(self, requester: APIRequester):
        self.requester = requester

    @staticmethod
    def malformed(endpoint: str, error: Exception) -> TransportError:
        """Error for a 2xx reply whose body lacks the expected fields"""
        return TransportError(f"Malformed reply: {type(error).__name__}: {error}", endpoint=endpoint)

    def __repr__(self):
        return f"{type(self).__name__}({self.requester.base_url})"
