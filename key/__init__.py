"""
Key Package
Signing keys: in-memory, mnemonic-derived and remote signer proxies
"""

from .key import Key, address_from_public_key, address_to_bytes
from .raw_key import RawKey
from .mnemonic_key import MnemonicKey
from .remote_key import RemoteKey

__all__ = [
    'Key',
    'RawKey',
    'MnemonicKey',
    'RemoteKey',
    'address_from_public_key',
    'address_to_bytes'
]
