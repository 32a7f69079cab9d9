"""
Core Package
Coin amounts, fees, transaction envelopes and the error taxonomy
"""

from .coins import Coin, Coins
from .fee import Fee
from .tx import Msg, UnsignedTx, SignerData, SignDoc, SignatureEntry, SignedTx
from .errors import (
    LCDError,
    ConfigurationError,
    TransportError,
    EstimationError,
    SigningError,
    KeyUnavailableError,
    SequenceConflictError,
)

__all__ = [
    'Coin',
    'Coins',
    'Fee',
    'Msg',
    'UnsignedTx',
    'SignerData',
    'SignDoc',
    'SignatureEntry',
    'SignedTx',
    'LCDError',
    'ConfigurationError',
    'TransportError',
    'EstimationError',
    'SigningError',
    'KeyUnavailableError',
    'SequenceConflictError'
]
