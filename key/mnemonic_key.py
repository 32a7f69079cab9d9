"""
Mnemonic Key
Raw key derived from a BIP-39 mnemonic along a BIP-44 path
"""

from typing import Optional

from eth_account import Account
from loguru import logger

from .key import DEFAULT_PREFIX
from .raw_key import RawKey


Account.enable_unaudited_hdwallet_features()

COIN_TYPE = 60


class MnemonicKey(RawKey):
    """
    Key derived from ``m/44'/<coin_type>'/<account>'/0/<index>``

    A fresh 24-word mnemonic is generated when none is given; read it back
    from ``mnemonic`` to back it up.
    """

    def __init__(
        self,
        mnemonic: Optional[str] = None,
        account: int = 0,
        index: int = 0,
        coin_type: int = COIN_TYPE,
        prefix: str = DEFAULT_PREFIX
    ):
        if mnemonic is None:
            _, mnemonic = Account.create_with_mnemonic(num_words=24)
            logger.debug("Generated new mnemonic")

        self.mnemonic = mnemonic
        self.hd_path = f"m/44'/{coin_type}'/{account}'/0/{index}"

        local_account = Account.from_mnemonic(mnemonic, account_path=self.hd_path)
        super().__init__(bytes(local_account.key), prefix)
