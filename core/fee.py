"""
Fee
Gas limit plus the coins paid for it
"""

from dataclasses import dataclass, field
from typing import Dict

from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import Fee as FeeProto

from .coins import Coins


@dataclass(frozen=True)
class Fee:
    """Transaction fee; immutable once attached to a transaction"""

    gas_limit: int
    amount: Coins = field(default_factory=Coins)
    payer: str = ''
    granter: str = ''

    def __post_init__(self):
        if self.gas_limit < 0:
            raise ValueError(f"Gas limit must be non-negative, got {self.gas_limit}")
        if not isinstance(self.amount, Coins):
            object.__setattr__(self, 'amount', Coins(self.amount))

    def to_data(self) -> Dict:
        return {
            'gas_limit': str(self.gas_limit),
            'amount': self.amount.to_data(),
            'payer': self.payer,
            'granter': self.granter
        }

    def to_proto(self) -> FeeProto:
        return FeeProto(
            amount=self.amount.to_proto(),
            gas_limit=self.gas_limit,
            payer=self.payer,
            granter=self.granter
        )
