"""
LCD Client
Façade over a node's REST gateway: configuration, module accessors,
fee estimation, signing and broadcast
"""

from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from loguru import logger

from core.fee import Fee
from core.tx import SignedTx, SignerData, UnsignedTx
from key.key import Key
from .api import API_CLASSES, AuthAPI, BankAPI, BaseAPI, TendermintAPI, TxAPI
from .api.tx import BROADCAST_MODE_SYNC, BroadcastResult
from .api_requester import APIRequester
from .config import LCDClientConfig, resolve_config
from .fee_estimator import EstimateOverrides, FeeEstimator
from .tx_builder import Signer, TransactionBuilder
from .wallet import Wallet


class LCDClient:
    """
    Connection to a node running the Lite Client Daemon (LCD)

    Configuration is resolved once and frozen; build a new client to change
    it. A single requester is shared by every accessor, the estimator and
    the builder, so many wallets can use one client at the same time.

    Example::

        async with LCDClient("https://rest.testnet.initia.xyz", LCDClientConfig(chain_id="initiation-2")) as lcd:
            wallet = lcd.wallet(MnemonicKey(mnemonic))
            signed = await wallet.create_and_sign_tx(CreateTxOptions(msgs=[msg]))
            result = await wallet.submit(signed)
    """

    def __init__(
        self,
        url: str,
        config: Optional[LCDClientConfig] = None,
        requester: Optional[APIRequester] = None
    ):
        """
        Initialize LCD Client

        Args:
            url: LCD endpoint URL
            config: Caller configuration merged over chain defaults
            requester: Dispatcher to use instead of a new APIRequester
        """
        self.url = url
        self.config = resolve_config(config)
        self.requester = requester or APIRequester(url)

        self.apis: Mapping[str, BaseAPI] = MappingProxyType({
            api_class.name: api_class(self.requester) for api_class in API_CLASSES
        })

        self.estimator = FeeEstimator(self.config, self.tx)
        self.builder = TransactionBuilder(self.config, self.auth, self.tendermint)

        logger.info(f"LCD client initialized: {url} (chain: {self.config.chain_id or 'from node'})")

    @property
    def auth(self) -> AuthAPI:
        return self.apis['auth']

    @property
    def bank(self) -> BankAPI:
        return self.apis['bank']

    @property
    def tendermint(self) -> TendermintAPI:
        return self.apis['tendermint']

    @property
    def tx(self) -> TxAPI:
        return self.apis['tx']

    def wallet(self, key: Key) -> Wallet:
        """Create a wallet bound to this client"""
        return Wallet(self, key)

    async def estimate(
        self,
        tx: UnsignedTx,
        signer_infos: Sequence[SignerData],
        overrides: Optional[EstimateOverrides] = None
    ) -> Fee:
        return await self.estimator.estimate(tx, signer_infos, overrides)

    async def build(
        self,
        tx: UnsignedTx,
        fee: Fee,
        signers: Sequence[Signer],
        signer_infos: Optional[Sequence[SignerData]] = None
    ) -> SignedTx:
        return await self.builder.build(tx, fee, signers, signer_infos)

    async def submit(self, signed_tx: SignedTx, mode: str = BROADCAST_MODE_SYNC) -> BroadcastResult:
        """
        Broadcast a signed transaction

        Returns:
            BroadcastResult (txhash, code, raw_log)

        Raises:
            SequenceConflictError: The node reported a stale account sequence
            TransportError: Network failure or gateway error
        """
        return await self.tx.broadcast(signed_tx, mode)

    async def close(self):
        await self.requester.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
