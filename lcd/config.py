"""
Client Configuration
Layered resolution of chain id, gas prices and gas adjustment

Precedence, lowest first:
    1. DEFAULT_LCD_OPTIONS (global gas adjustment)
    2. DEFAULT_GAS_PRICES_BY_CHAIN_ID[chain_id], else the "default" entry
    3. Fields explicitly set on the caller's LCDClientConfig

Merging is field by field: a caller that only sets ``gas_adjustment`` still
receives the chain's default gas prices.
"""

import json
import os
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from loguru import logger

from core.coins import Coins, CoinsInput
from core.errors import ConfigurationError


DEFAULT_CHAIN_KEY = 'default'

DEFAULT_LCD_OPTIONS: Dict[str, str] = {
    'gas_adjustment': '1.75',
}

DEFAULT_GAS_PRICES_BY_CHAIN_ID: Dict[str, Dict[str, float]] = {
    DEFAULT_CHAIN_KEY: {
        'uinit': 0.15,
    },
}


@dataclass(frozen=True)
class LCDClientConfig:
    """
    Client configuration

    Every field is optional on input. After ``resolve_config`` the
    ``gas_prices`` and ``gas_adjustment`` fields always hold concrete values.
    ``fee_denom`` selects the fee denomination when several gas prices are
    configured.
    """

    chain_id: Optional[str] = None
    gas_prices: Optional[Coins] = None
    gas_adjustment: Optional[str] = None
    fee_denom: Optional[str] = None

    def __post_init__(self):
        if self.gas_prices is not None and not isinstance(self.gas_prices, Coins):
            object.__setattr__(self, 'gas_prices', Coins(self.gas_prices))
        if self.gas_adjustment is not None:
            object.__setattr__(self, 'gas_adjustment', str(self.gas_adjustment))

    @property
    def gas_adjustment_decimal(self) -> Decimal:
        return parse_gas_adjustment(self.gas_adjustment)

    @classmethod
    def from_env(cls, prefix: str = 'LCD_') -> 'LCDClientConfig':
        """
        Build a caller config from environment variables (and ``.env``)

        Reads ``<prefix>CHAIN_ID``, ``<prefix>GAS_PRICES`` (e.g.
        ``"0.15uinit"``), ``<prefix>GAS_ADJUSTMENT`` and
        ``<prefix>FEE_DENOM``. Unset variables stay unset.
        """
        load_dotenv()

        gas_prices = os.getenv(f'{prefix}GAS_PRICES')

        return cls(
            chain_id=os.getenv(f'{prefix}CHAIN_ID') or None,
            gas_prices=Coins.from_string(gas_prices) if gas_prices else None,
            gas_adjustment=os.getenv(f'{prefix}GAS_ADJUSTMENT') or None,
            fee_denom=os.getenv(f'{prefix}FEE_DENOM') or None
        )

    @classmethod
    def from_file(cls, path: str) -> 'LCDClientConfig':
        """
        Build a caller config from a JSON file

        Example::

            {"chain_id": "initiation-2", "gas_prices": {"uinit": 0.15}}
        """
        with open(path, 'r') as f:
            data = json.load(f)

        gas_prices = data.get('gas_prices')
        if isinstance(gas_prices, list):
            gas_prices = Coins.from_data(gas_prices)

        return cls(
            chain_id=data.get('chain_id'),
            gas_prices=gas_prices,
            gas_adjustment=data.get('gas_adjustment'),
            fee_denom=data.get('fee_denom')
        )


def parse_gas_adjustment(value: Optional[str]) -> Decimal:
    try:
        adjustment = Decimal(str(value))
    except (InvalidOperation, TypeError) as e:
        raise ConfigurationError(f"Invalid gas adjustment: {value!r}") from e

    if not adjustment.is_finite() or adjustment <= 0:
        raise ConfigurationError(f"Gas adjustment must be positive, got {value!r}")
    return adjustment


def default_gas_prices(
    chain_id: Optional[str],
    table: Mapping[str, CoinsInput] = DEFAULT_GAS_PRICES_BY_CHAIN_ID
) -> Coins:
    """
    Gas price table for a chain id, falling back to the "default" entry

    Raises:
        ConfigurationError: Neither the chain nor a default entry exists
    """
    if chain_id and chain_id in table:
        return Coins(table[chain_id])

    if DEFAULT_CHAIN_KEY not in table:
        raise ConfigurationError(
            f"No gas prices for chain {chain_id!r} and no {DEFAULT_CHAIN_KEY!r} entry"
        )

    return Coins(table[DEFAULT_CHAIN_KEY])


def resolve_config(
    config: Optional[LCDClientConfig] = None,
    gas_prices_table: Mapping[str, CoinsInput] = DEFAULT_GAS_PRICES_BY_CHAIN_ID
) -> LCDClientConfig:
    """
    Merge caller config over chain and global defaults

    Args:
        config: Caller supplied fields (None = all defaults)
        gas_prices_table: Per-chain default gas prices

    Returns:
        Config with concrete gas prices and gas adjustment
    """
    config = config or LCDClientConfig()

    resolved = LCDClientConfig(
        chain_id=config.chain_id,
        gas_adjustment=DEFAULT_LCD_OPTIONS['gas_adjustment']
    )

    # the chain table is only consulted when the caller left gas prices unset
    if config.gas_prices is None:
        resolved = replace(resolved, gas_prices=default_gas_prices(config.chain_id, gas_prices_table))

    overrides = {
        name: getattr(config, name)
        for name in ('gas_prices', 'gas_adjustment', 'fee_denom')
        if getattr(config, name) is not None
    }
    resolved = replace(resolved, **overrides)

    # fail at construction rather than on the first estimate
    parse_gas_adjustment(resolved.gas_adjustment)

    logger.debug(
        f"Resolved client config: chain_id={resolved.chain_id} "
        f"gas_prices={resolved.gas_prices} gas_adjustment={resolved.gas_adjustment}"
    )

    return resolved
