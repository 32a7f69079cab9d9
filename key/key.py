"""
Key
Abstract signing key shared by local, mnemonic and remote variants
"""

from abc import ABC, abstractmethod

import bech32
from eth_keys import keys
from web3 import Web3

from core.tx import SignerData


DEFAULT_PREFIX = 'init'
PUBLIC_KEY_TYPE_URL = '/initia.crypto.v1beta1.ethsecp256k1.PubKey'


def address_from_public_key(public_key: bytes, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Derive the bech32 account address of a compressed secp256k1 public key

    The address payload is the 20-byte Ethereum address of the key.
    """
    canonical = keys.PublicKey.from_compressed_bytes(public_key).to_canonical_address()
    return bech32.bech32_encode(prefix, bech32.convertbits(canonical, 8, 5))


def address_to_bytes(address: str) -> bytes:
    """Decode a bech32 account address to its 20-byte payload"""
    _, data = bech32.bech32_decode(address)
    if data is None:
        raise ValueError(f"Invalid bech32 address: {address}")
    return bytes(bech32.convertbits(data, 5, 8, False))


class Key(ABC):
    """
    Capability to sign on behalf of one account

    Subclasses only differ in where the private material lives; the
    transaction builder only relies on ``public_key``, ``address`` and
    ``sign``.
    """

    public_key_type_url = PUBLIC_KEY_TYPE_URL

    def __init__(self, public_key: bytes, prefix: str = DEFAULT_PREFIX):
        """
        Initialize Key

        Args:
            public_key: 33-byte compressed secp256k1 public key
            prefix: Bech32 human readable part of account addresses
        """
        if len(public_key) != 33:
            raise ValueError(f"Expected 33-byte compressed public key, got {len(public_key)} bytes")

        self._public_key = bytes(public_key)
        self.prefix = prefix
        self._address = address_from_public_key(self._public_key, prefix)

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def address(self) -> str:
        return self._address

    @property
    def eth_address(self) -> str:
        """Checksummed hex form of the same account"""
        return Web3.to_checksum_address(address_to_bytes(self._address))

    @abstractmethod
    async def sign(self, payload: bytes) -> bytes:
        """
        Sign an arbitrary payload

        Args:
            payload: Bytes to sign (a serialized SignDoc)

        Returns:
            64-byte ``r || s`` signature over keccak256(payload)

        Raises:
            KeyUnavailableError: Key material cannot produce a signature
        """

    def signer_data(self, account_number: int, sequence: int) -> SignerData:
        return SignerData(
            address=self.address,
            public_key=self.public_key,
            public_key_type_url=self.public_key_type_url,
            account_number=account_number,
            sequence=sequence
        )

    def __repr__(self):
        return f"{type(self).__name__}({self.address})"
