"""
Coins
Immutable multi-denomination amounts used for balances, gas prices and fees
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_CEILING, ROUND_DOWN
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from cosmpy.protos.cosmos.base.v1beta1.coin_pb2 import Coin as CoinProto


Numeric = Union[Decimal, int, float, str]

# amount immediately followed by denom, e.g. "100uinit", "0.15uinit", "5ibc/27394F..."
COIN_PATTERN = re.compile(r'^(-?[0-9]+(?:\.[0-9]+)?)([a-zA-Z][a-zA-Z0-9/:._-]{1,127})$')


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a literal amount to Decimal

    Floats go through ``str`` so 0.15 stays 0.15 rather than its binary
    approximation.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


def format_amount(amount: Decimal) -> str:
    """Plain (non-exponent) string form of an amount"""
    if amount == 0:
        return "0"
    return format(amount.normalize(), 'f')


@dataclass(frozen=True)
class Coin:
    """A single (denom, amount) pair"""

    denom: str
    amount: Decimal

    def __post_init__(self):
        if not self.denom:
            raise ValueError("Coin denom must not be empty")
        object.__setattr__(self, 'amount', to_decimal(self.amount))

    @classmethod
    def from_string(cls, text: str) -> 'Coin':
        """Parse ``"<amount><denom>"``"""
        match = COIN_PATTERN.match(text.strip())
        if not match:
            raise ValueError(f"Failed to parse coin: {text!r}")
        return cls(match.group(2), Decimal(match.group(1)))

    @classmethod
    def from_data(cls, data: Dict) -> 'Coin':
        return cls(data['denom'], Decimal(str(data['amount'])))

    def to_data(self) -> Dict[str, str]:
        return {'denom': self.denom, 'amount': format_amount(self.amount)}

    def to_proto(self) -> CoinProto:
        if not self.is_integral():
            raise ValueError(f"Coin amount must be integral for encoding: {self}")
        return CoinProto(denom=self.denom, amount=str(int(self.amount)))

    def is_integral(self) -> bool:
        return self.amount == self.amount.to_integral_value()

    def to_int_coin(self) -> 'Coin':
        return Coin(self.denom, self.amount.to_integral_value(rounding=ROUND_DOWN))

    def to_int_ceil_coin(self) -> 'Coin':
        return Coin(self.denom, self.amount.to_integral_value(rounding=ROUND_CEILING))

    def __str__(self):
        return f"{format_amount(self.amount)}{self.denom}"


CoinsInput = Union['Coins', Mapping[str, Numeric], Iterable[Coin], str, None]


class Coins:
    """
    Immutable set of coins keyed by denomination

    Entries are kept sorted by denom, with at most one entry per denom.
    Duplicate denoms in the input are summed. Zero amounts given at
    construction are kept (a zero gas price is a valid price), while
    ``sub`` and ``mul`` drop entries that end up at zero. Negative amounts
    are allowed for sets that represent a delta.
    """

    __slots__ = ('_coins',)

    def __init__(self, coins: CoinsInput = None):
        totals: Dict[str, Decimal] = {}
        for coin in _iter_input(coins):
            totals[coin.denom] = totals.get(coin.denom, Decimal(0)) + coin.amount

        self._coins = tuple(Coin(denom, totals[denom]) for denom in sorted(totals))

    @classmethod
    def from_string(cls, text: str) -> 'Coins':
        """Parse a comma separated list such as ``"100uinit,2.5uusdc"``"""
        parts = [part for part in text.split(',') if part.strip()]
        return cls(Coin.from_string(part) for part in parts)

    @classmethod
    def from_data(cls, data: Optional[List[Dict]]) -> 'Coins':
        return cls(Coin.from_data(item) for item in (data or []))

    def to_data(self) -> List[Dict[str, str]]:
        return [coin.to_data() for coin in self._coins]

    def to_proto(self) -> List[CoinProto]:
        return [coin.to_proto() for coin in self._coins]

    def to_string(self) -> str:
        return ','.join(str(coin) for coin in self._coins)

    def get(self, denom: str) -> Optional[Coin]:
        for coin in self._coins:
            if coin.denom == denom:
                return coin
        return None

    def denoms(self) -> List[str]:
        return [coin.denom for coin in self._coins]

    def add(self, other: Union[Coin, CoinsInput]) -> 'Coins':
        """Sum of both sets"""
        return Coins(list(self._coins) + list(_iter_input(_wrap(other))))

    def sub(self, other: Union[Coin, CoinsInput]) -> 'Coins':
        """Difference of both sets; denominations that reach zero are removed"""
        negated = [Coin(coin.denom, -coin.amount) for coin in _iter_input(_wrap(other))]
        return Coins(list(self._coins) + negated).filter(_is_nonzero)

    def mul(self, factor: Numeric) -> 'Coins':
        """Every amount scaled by ``factor``; entries that reach zero are removed"""
        multiplier = to_decimal(factor)
        scaled = Coins(Coin(coin.denom, coin.amount * multiplier) for coin in self._coins)
        return scaled.filter(_is_nonzero)

    def filter(self, predicate: Callable[[Coin], bool]) -> 'Coins':
        return Coins(coin for coin in self._coins if predicate(coin))

    def to_int_coins(self) -> 'Coins':
        return Coins(coin.to_int_coin() for coin in self._coins)

    def to_int_ceil_coins(self) -> 'Coins':
        return Coins(coin.to_int_ceil_coin() for coin in self._coins)

    def is_empty(self) -> bool:
        return not self._coins

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.sub(other)

    def __iter__(self) -> Iterator[Coin]:
        return iter(self._coins)

    def __len__(self) -> int:
        return len(self._coins)

    def __contains__(self, denom: str) -> bool:
        return self.get(denom) is not None

    def __eq__(self, other):
        if not isinstance(other, Coins):
            return NotImplemented
        return self._coins == other._coins

    def __hash__(self):
        return hash(self._coins)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"Coins({self.to_string()!r})"


def _is_nonzero(coin: Coin) -> bool:
    return coin.amount != 0


def _wrap(value):
    if isinstance(value, Coin):
        return [value]
    return value


def _iter_input(coins: CoinsInput) -> Iterator[Coin]:
    if coins is None:
        return
    if isinstance(coins, Coins):
        yield from coins
    elif isinstance(coins, str):
        yield from Coins.from_string(coins)
    elif isinstance(coins, Mapping):
        for denom, amount in coins.items():
            yield Coin(denom, to_decimal(amount))
    else:
        for coin in coins:
            if not isinstance(coin, Coin):
                raise TypeError(f"Expected Coin, got {type(coin).__name__}")
            yield coin
