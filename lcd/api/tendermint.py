"""
Tendermint API
Node and block information
"""

from typing import Dict, Optional

from .base import BaseAPI


NODE_INFO = "/cosmos/base/tendermint/v1beta1/node_info"


class TendermintAPI(BaseAPI):
    """Queries of the consensus node"""

    name = 'tendermint'

    async def node_info(self) -> Dict:
        return await self.requester.get(NODE_INFO)

    async def chain_id(self) -> str:
        """Network id the node reports"""
        info = await self.node_info()
        try:
            return info['default_node_info']['network']
        except (KeyError, TypeError) as e:
            raise self.malformed(NODE_INFO, e) from e

    async def syncing(self) -> bool:
        data = await self.requester.get("/cosmos/base/tendermint/v1beta1/syncing")
        return bool(data.get('syncing'))

    async def block_info(self, height: Optional[int] = None) -> Dict:
        target = str(height) if height is not None else 'latest'
        return await self.requester.get(f"/cosmos/base/tendermint/v1beta1/blocks/{target}")
