"""
Auth API
Account number and sequence lookup
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .base import BaseAPI


@dataclass(frozen=True)
class AccountInfo:
    address: str
    account_number: int
    sequence: int
    public_key: Optional[Dict] = None


def _base_account(account: Dict) -> Dict:
    """Unwrap module and vesting accounts down to their base account"""
    while 'account_number' not in account:
        for nested in ('base_account', 'base_vesting_account'):
            if nested in account:
                account = account[nested]
                break
        else:
            raise ValueError(f"Unrecognized account layout: {sorted(account)}")
    return account


class AuthAPI(BaseAPI):
    """Queries of the auth module"""

    name = 'auth'

    async def account_info(self, address: str) -> AccountInfo:
        """
        Fetch on-chain account state

        Args:
            address: Bech32 account address

        Returns:
            AccountInfo with the current account number and sequence

        Raises:
            TransportError: Node error, or a reply without account fields
        """
        endpoint = f"/cosmos/auth/v1beta1/accounts/{address}"
        data = await self.requester.get(endpoint)

        try:
            account = _base_account(data['account'])
            return AccountInfo(
                address=account.get('address', address),
                account_number=int(account['account_number']),
                sequence=int(account.get('sequence') or 0),
                public_key=account.get('pub_key')
            )
        except (KeyError, TypeError, ValueError) as e:
            raise self.malformed(endpoint, e) from e

    async def account_number_and_sequence(self, address: str) -> Tuple[int, int]:
        info = await self.account_info(address)
        return (info.account_number, info.sequence)

    async def parameters(self) -> Dict:
        endpoint = "/cosmos/auth/v1beta1/params"
        data = await self.requester.get(endpoint)
        try:
            return data['params']
        except KeyError as e:
            raise self.malformed(endpoint, e) from e
