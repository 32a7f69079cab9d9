"""
Errors
Exception taxonomy shared by the key, core and client packages
"""

from typing import Optional


class LCDError(Exception):
    """Base class for every error raised by this library"""


class ConfigurationError(LCDError):
    """Client configuration could not be resolved to concrete values"""


class TransportError(LCDError):
    """
    Network failure or non-success reply from the node

    Node error bodies are normalized to a status code plus message.
    ``status`` is None when no HTTP response was received (connection
    error, timeout).
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[int] = None,
        endpoint: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.endpoint = endpoint

    def __str__(self):
        where = f" {self.endpoint}" if self.endpoint else ""
        status = self.status if self.status is not None else "no response"
        return f"[{status}]{where}: {self.message}"


class EstimationError(LCDError):
    """Gas simulation failed or the fee denomination is ambiguous"""

    def __init__(
        self,
        message: str,
        fee_denom: Optional[str] = None,
        gas_used: Optional[int] = None,
        gas_limit: Optional[int] = None
    ):
        super().__init__(message)
        self.fee_denom = fee_denom
        self.gas_used = gas_used
        self.gas_limit = gas_limit


class SigningError(LCDError):
    """A signer could not produce its signature; the whole build is aborted"""

    def __init__(
        self,
        message: str,
        signer_index: Optional[int] = None,
        address: Optional[str] = None
    ):
        super().__init__(message)
        self.signer_index = signer_index
        self.address = address


class KeyUnavailableError(SigningError):
    """Key material cannot produce a signature right now"""


class SequenceConflictError(LCDError):
    """Node rejected the transaction because the account sequence is stale"""

    def __init__(self, message: str, txhash: Optional[str] = None, raw_log: str = ""):
        super().__init__(message)
        self.txhash = txhash
        self.raw_log = raw_log
