"""
Tx API
Simulation, broadcast and lookup of transactions
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from loguru import logger

from core.errors import SequenceConflictError, TransportError
from core.fee import Fee
from core.tx import SignedTx, SignerData, UnsignedTx, encode_for_simulation
from .base import BaseAPI


# sdkerrors.ErrWrongSequence
WRONG_SEQUENCE_CODE = 32
SDK_CODESPACE = 'sdk'

BROADCAST_MODE_SYNC = 'BROADCAST_MODE_SYNC'
BROADCAST_MODE_ASYNC = 'BROADCAST_MODE_ASYNC'


@dataclass(frozen=True)
class BroadcastResult:
    """Node reply to a broadcast; ``code`` 0 means accepted into the mempool"""

    txhash: str
    code: int
    raw_log: str
    codespace: str = ''
    height: int = 0

    @property
    def is_success(self) -> bool:
        return self.code == 0

    @classmethod
    def from_data(cls, data: Dict) -> 'BroadcastResult':
        return cls(
            txhash=data.get('txhash', ''),
            code=int(data.get('code') or 0),
            raw_log=data.get('raw_log', ''),
            codespace=data.get('codespace', ''),
            height=int(data.get('height') or 0)
        )


def is_sequence_conflict(codespace: str, code: Optional[int], message: str) -> bool:
    if codespace == SDK_CODESPACE and code == WRONG_SEQUENCE_CODE:
        return True
    return 'account sequence mismatch' in (message or '')


class TxAPI(BaseAPI):
    """Transaction service of the node"""

    name = 'tx'

    async def simulate(
        self,
        tx: UnsignedTx,
        fee: Fee,
        signer_infos: Sequence[SignerData]
    ) -> int:
        """
        Simulate execution of an unsigned transaction

        Args:
            tx: Draft transaction
            fee: Fee to embed (the amount does not affect gas)
            signer_infos: Public keys and sequences of every signer

        Returns:
            Gas units used by the simulated execution
        """
        endpoint = "/cosmos/tx/v1beta1/simulate"
        tx_bytes = encode_for_simulation(tx, fee, list(signer_infos))
        data = await self.requester.post(endpoint, {'tx_bytes': tx_bytes})

        gas_info = data.get('gas_info') or {}
        if 'gas_used' not in gas_info:
            raise TransportError("Simulation reply has no gas_info.gas_used", endpoint=endpoint)

        try:
            return int(gas_info['gas_used'])
        except (TypeError, ValueError) as e:
            raise self.malformed(endpoint, e) from e

    async def broadcast(self, signed_tx: SignedTx, mode: str = BROADCAST_MODE_SYNC) -> BroadcastResult:
        """
        Submit a signed transaction

        A stale account sequence raises SequenceConflictError; it is never
        retried here because resubmitting would reuse the wrong sequence.
        Any other non-zero code is returned to the caller.

        Args:
            signed_tx: Transaction produced by the builder
            mode: BROADCAST_MODE_SYNC or BROADCAST_MODE_ASYNC

        Returns:
            BroadcastResult with txhash, code and raw log
        """
        try:
            data = await self.requester.post(
                "/cosmos/tx/v1beta1/txs",
                {'tx_bytes': signed_tx.to_base64(), 'mode': mode}
            )
        except TransportError as e:
            if is_sequence_conflict('', None, e.message):
                raise SequenceConflictError(e.message, txhash=signed_tx.hash()) from e
            raise

        result = BroadcastResult.from_data(data.get('tx_response') or {})

        if is_sequence_conflict(result.codespace, result.code, result.raw_log):
            logger.warning(f"Sequence conflict for {result.txhash}: {result.raw_log}")
            raise SequenceConflictError(
                f"Account sequence mismatch: {result.raw_log}",
                txhash=result.txhash or signed_tx.hash(),
                raw_log=result.raw_log
            )

        if result.is_success:
            logger.info(f"Broadcast accepted: {result.txhash}")
        else:
            logger.warning(
                f"Broadcast rejected: {result.txhash} code={result.code} "
                f"codespace={result.codespace} log={result.raw_log}"
            )

        return result

    async def tx_info(self, tx_hash: str) -> Dict:
        data = await self.requester.get(f"/cosmos/tx/v1beta1/txs/{tx_hash}")
        return data.get('tx_response') or {}
