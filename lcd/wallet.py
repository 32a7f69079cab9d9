"""
Wallet
One signing key bound to a client
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from loguru import logger

from core.coins import CoinsInput
from core.tx import Msg, SignedTx, UnsignedTx
from key.key import Key
from .api.tx import BROADCAST_MODE_SYNC, BroadcastResult
from .fee_estimator import EstimateOverrides
from .tx_builder import Signer


@dataclass(frozen=True)
class CreateTxOptions:
    """
    Inputs of a single-signer transaction

    ``fee`` is a fee amount; with ``gas`` it bypasses estimation.
    ``account_number`` and ``sequence`` together allow offline signing.
    """

    msgs: Sequence[Msg]
    memo: str = ''
    timeout_height: int = 0
    gas: Optional[int] = None
    fee: Optional[CoinsInput] = None
    gas_prices: Optional[CoinsInput] = None
    gas_adjustment: Optional[str] = None
    fee_denom: Optional[str] = None
    account_number: Optional[int] = None
    sequence: Optional[int] = None

    def to_unsigned_tx(self) -> UnsignedTx:
        return UnsignedTx(msgs=tuple(self.msgs), memo=self.memo, timeout_height=self.timeout_height)

    def to_overrides(self) -> EstimateOverrides:
        return EstimateOverrides(
            gas=self.gas,
            fee_amount=self.fee,
            gas_prices=self.gas_prices,
            gas_adjustment=self.gas_adjustment,
            fee_denom=self.fee_denom
        )


class Wallet:
    """
    Key plus the client used to query, estimate, sign and submit

    Several wallets may share one client concurrently. Submissions from the
    same account are not sequenced here: callers sending several
    transactions from one wallet at once must assign sequences themselves.
    """

    def __init__(self, lcd, key: Key):
        """
        Initialize Wallet

        Args:
            lcd: LCDClient shared with other wallets
            key: Key owned by this wallet
        """
        self.lcd = lcd
        self.key = key

    @property
    def address(self) -> str:
        return self.key.address

    async def account_number_and_sequence(self) -> Tuple[int, int]:
        return await self.lcd.auth.account_number_and_sequence(self.key.address)

    async def create_and_sign_tx(self, options: CreateTxOptions) -> SignedTx:
        """
        Estimate the fee and sign a transaction

        The account is looked up once and shared by estimation and signing.

        Args:
            options: Messages plus optional fee / account overrides

        Returns:
            Signed transaction, not yet broadcast
        """
        tx = options.to_unsigned_tx()
        signers = [Signer(self.key, options.account_number, options.sequence)]

        signer_infos = await self.lcd.builder.resolve_signer_infos(signers)
        fee = await self.lcd.estimate(tx, signer_infos, options.to_overrides())

        return await self.lcd.build(tx, fee, signers, signer_infos)

    async def submit(self, signed_tx: SignedTx, mode: str = BROADCAST_MODE_SYNC) -> BroadcastResult:
        return await self.lcd.submit(signed_tx, mode)

    async def create_and_submit(self, options: CreateTxOptions) -> BroadcastResult:
        """Sign then broadcast; a sequence conflict is raised, not retried"""
        signed_tx = await self.create_and_sign_tx(options)
        logger.info(f"Submitting tx {signed_tx.hash()} from {self.address}")
        return await self.submit(signed_tx)

    def __repr__(self):
        return f"Wallet({self.address})"
