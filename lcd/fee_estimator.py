"""
Fee Estimator
Gas simulation, gas adjustment and fee computation
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING
from typing import Optional, Sequence

from loguru import logger

from core.coins import Coins, CoinsInput
from core.errors import EstimationError, TransportError
from core.fee import Fee
from core.tx import SignerData, UnsignedTx
from .api.tx import TxAPI
from .config import LCDClientConfig, parse_gas_adjustment


@dataclass(frozen=True)
class EstimateOverrides:
    """
    Per-call replacements for estimation inputs

    ``gas`` and ``fee_amount`` together skip estimation entirely. ``gas``
    alone skips simulation. The remaining fields replace the client's
    configured values for this call only.
    """

    gas: Optional[int] = None
    fee_amount: Optional[CoinsInput] = None
    gas_prices: Optional[CoinsInput] = None
    gas_adjustment: Optional[str] = None
    fee_denom: Optional[str] = None


def adjust_gas(gas_used: int, gas_adjustment: Decimal) -> int:
    """Apply the safety multiplier and round up to whole gas units"""
    adjusted = Decimal(gas_used) * gas_adjustment
    return int(adjusted.to_integral_value(rounding=ROUND_CEILING))


def select_fee_denom(gas_prices: Coins, fee_denom: Optional[str] = None) -> str:
    """
    Pick the single denomination the fee is paid in

    An explicit ``fee_denom`` wins and must be priced. Without one, the
    gas price table must hold exactly one denomination.

    Raises:
        EstimationError: No price for the requested denom, an empty table,
            or several denominations with no explicit choice
    """
    if fee_denom is not None:
        if fee_denom not in gas_prices:
            raise EstimationError(
                f"No gas price configured for fee denom {fee_denom!r} "
                f"(configured: {gas_prices.denoms()})",
                fee_denom=fee_denom
            )
        return fee_denom

    denoms = gas_prices.denoms()
    if not denoms:
        raise EstimationError("No gas prices configured")
    if len(denoms) > 1:
        raise EstimationError(
            f"Ambiguous fee denom, gas prices configured for {denoms}; set fee_denom",
            fee_denom=','.join(denoms)
        )
    return denoms[0]


def fee_amount_for_gas(gas_limit: int, gas_prices: Coins, fee_denom: str) -> Coins:
    """
    ceil(gas_limit * price) in the chosen denomination

    A zero price yields an empty amount (no fee coins).
    """
    price = gas_prices.get(fee_denom)
    if price is None:
        raise EstimationError(
            f"No gas price configured for fee denom {fee_denom!r}",
            fee_denom=fee_denom,
            gas_limit=gas_limit
        )

    amount = (price.amount * gas_limit).to_integral_value(rounding=ROUND_CEILING)
    if amount == 0:
        return Coins()
    return Coins({fee_denom: amount})


class FeeEstimator:
    """
    Turns a draft transaction into a Fee

    At most one network round trip (the simulation) per estimate.
    """

    def __init__(self, config: LCDClientConfig, tx_api: TxAPI):
        """
        Initialize Fee Estimator

        Args:
            config: Resolved client configuration
            tx_api: Accessor used for simulation
        """
        self.config = config
        self.tx_api = tx_api

    async def estimate(
        self,
        tx: UnsignedTx,
        signer_infos: Sequence[SignerData],
        overrides: Optional[EstimateOverrides] = None
    ) -> Fee:
        """
        Estimate the fee of a draft transaction

        Args:
            tx: Draft transaction (messages, memo, timeout height)
            signer_infos: Public key and sequence of every signer
            overrides: Caller supplied gas / fee / pricing values

        Returns:
            Fee with gas limit and amount

        Raises:
            EstimationError: Simulation failed or the fee denom is ambiguous
        """
        overrides = overrides or EstimateOverrides()

        if overrides.gas is not None and overrides.fee_amount is not None:
            return Fee(int(overrides.gas), Coins(overrides.fee_amount))

        gas_prices = (
            Coins(overrides.gas_prices) if overrides.gas_prices is not None
            else self.config.gas_prices
        )

        fee_denom = None
        if overrides.fee_amount is None:
            fee_denom = select_fee_denom(gas_prices, overrides.fee_denom or self.config.fee_denom)

        if overrides.gas is not None:
            gas_limit = int(overrides.gas)
        else:
            adjustment = parse_gas_adjustment(
                overrides.gas_adjustment if overrides.gas_adjustment is not None
                else self.config.gas_adjustment
            )
            gas_limit = await self.estimate_gas(tx, signer_infos, adjustment, fee_denom)

        if overrides.fee_amount is not None:
            amount = Coins(overrides.fee_amount)
        else:
            amount = fee_amount_for_gas(gas_limit, gas_prices, fee_denom)

        logger.debug(f"Estimated fee: gas_limit={gas_limit} amount={amount}")
        return Fee(gas_limit, amount)

    async def estimate_gas(
        self,
        tx: UnsignedTx,
        signer_infos: Sequence[SignerData],
        gas_adjustment: Decimal,
        fee_denom: Optional[str] = None
    ) -> int:
        """
        Simulate the transaction and apply the gas adjustment

        Args:
            tx: Draft transaction
            signer_infos: Public key and sequence of every signer
            gas_adjustment: Multiplier applied to simulated gas
            fee_denom: Denomination the fee will be paid in, reported on failure

        Returns:
            Adjusted gas limit
        """
        try:
            gas_used = await self.tx_api.simulate(tx, Fee(0), signer_infos)
        except TransportError as e:
            logger.error(f"Simulation failed: {e}")
            raise EstimationError(f"Simulation failed: {e}", fee_denom=fee_denom) from e

        if gas_used < 0:
            raise EstimationError(
                f"Simulation reported negative gas: {gas_used}",
                fee_denom=fee_denom,
                gas_used=gas_used
            )

        gas_limit = adjust_gas(gas_used, gas_adjustment)
        logger.debug(f"Simulated gas {gas_used} x {gas_adjustment} -> {gas_limit}")

        return gas_limit
