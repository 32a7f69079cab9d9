"""
Bank API
Balance and supply queries
"""

from typing import Dict, Optional, Tuple

from core.coins import Coin, Coins
from .base import BaseAPI


class BankAPI(BaseAPI):
    """Queries of the bank module"""

    name = 'bank'

    async def balance(self, address: str, params: Optional[Dict] = None) -> Tuple[Coins, Dict]:
        """
        All balances of an account

        Returns:
            (balances, pagination)
        """
        data = await self.requester.get(f"/cosmos/bank/v1beta1/balances/{address}", params)
        return (Coins.from_data(data.get('balances')), data.get('pagination') or {})

    async def balance_by_denom(self, address: str, denom: str) -> Coin:
        endpoint = f"/cosmos/bank/v1beta1/balances/{address}/by_denom"
        data = await self.requester.get(endpoint, {'denom': denom})
        try:
            return Coin.from_data(data['balance'])
        except (KeyError, TypeError, ValueError) as e:
            raise self.malformed(endpoint, e) from e

    async def total(self, params: Optional[Dict] = None) -> Tuple[Coins, Dict]:
        data = await self.requester.get("/cosmos/bank/v1beta1/supply", params)
        return (Coins.from_data(data.get('supply')), data.get('pagination') or {})
