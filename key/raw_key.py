"""
Raw Key
Signing key backed by private key material held in memory
"""

from typing import Union

from eth_account import Account
from eth_keys import keys
from web3 import Web3

from .key import DEFAULT_PREFIX, Key


class RawKey(Key):
    """Key created directly from a secp256k1 private key"""

    def __init__(self, private_key: Union[bytes, str], prefix: str = DEFAULT_PREFIX):
        """
        Initialize Raw Key

        Args:
            private_key: 32 private key bytes or their hex string
            prefix: Bech32 address prefix
        """
        account = Account.from_key(private_key)
        self._private_key = keys.PrivateKey(bytes(account.key))

        super().__init__(self._private_key.public_key.to_compressed_bytes(), prefix)

    @property
    def private_key(self) -> bytes:
        return self._private_key.to_bytes()

    def sign_sync(self, payload: bytes) -> bytes:
        """Blocking signature, used by ``sign`` and by offline tooling"""
        msg_hash = Web3.keccak(payload)
        signature = self._private_key.sign_msg_hash(bytes(msg_hash))
        # drop the recovery byte, the chain expects r || s
        return signature.to_bytes()[:64]

    async def sign(self, payload: bytes) -> bytes:
        return self.sign_sync(payload)
