"""
Transaction Builder
Assembles sign documents and collects signatures from one or more keys
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from core.errors import SigningError
from core.fee import Fee
from core.tx import SignatureEntry, SignDoc, SignedTx, SignerData, UnsignedTx, auth_info_bytes
from key.key import Key
from .api.auth import AuthAPI
from .api.tendermint import TendermintAPI
from .config import LCDClientConfig


SIGNATURE_LENGTH = 64


@dataclass(frozen=True)
class Signer:
    """
    A key taking part in a transaction

    Giving both ``account_number`` and ``sequence`` skips the account
    lookup, which allows signing offline.
    """

    key: Key
    account_number: Optional[int] = None
    sequence: Optional[int] = None

    @property
    def is_offline(self) -> bool:
        return self.account_number is not None and self.sequence is not None


class TransactionBuilder:
    """
    Builds SignedTx envelopes

    Building never broadcasts. Every signer signs the same body and auth
    info; sign documents differ only by the signer's account number.
    """

    def __init__(
        self,
        config: LCDClientConfig,
        auth_api: AuthAPI,
        tendermint_api: TendermintAPI
    ):
        """
        Initialize Transaction Builder

        Args:
            config: Resolved client configuration
            auth_api: Accessor used for account number / sequence lookup
            tendermint_api: Accessor used when no chain id is configured
        """
        self.config = config
        self.auth_api = auth_api
        self.tendermint_api = tendermint_api

    async def resolve_signer_infos(self, signers: Sequence[Signer]) -> List[SignerData]:
        """
        Account number and sequence of every signer, in signer order

        Each lookup only queries that signer's own address. Lookups run
        concurrently; the first failure is raised and the remaining lookups
        are cancelled.
        """
        async def resolve(signer: Signer) -> SignerData:
            if signer.is_offline:
                return signer.key.signer_data(signer.account_number, signer.sequence)

            account_number, sequence = await self.auth_api.account_number_and_sequence(
                signer.key.address
            )
            if signer.account_number is not None:
                account_number = signer.account_number
            if signer.sequence is not None:
                sequence = signer.sequence

            logger.debug(
                f"Account {signer.key.address}: number={account_number} sequence={sequence}"
            )
            return signer.key.signer_data(account_number, sequence)

        lookups = [asyncio.ensure_future(resolve(signer)) for signer in signers]
        try:
            return list(await asyncio.gather(*lookups))
        except BaseException:
            for lookup in lookups:
                lookup.cancel()
            raise

    async def resolve_chain_id(self) -> str:
        if self.config.chain_id:
            return self.config.chain_id
        return await self.tendermint_api.chain_id()

    async def build(
        self,
        tx: UnsignedTx,
        fee: Fee,
        signers: Sequence[Signer],
        signer_infos: Optional[Sequence[SignerData]] = None
    ) -> SignedTx:
        """
        Sign a transaction with every signer

        Args:
            tx: Draft transaction (messages, memo, timeout height)
            fee: Fee from the estimator or the caller
            signers: Keys in on-chain signer order
            signer_infos: Already resolved account state for ``signers``;
                looked up when omitted

        Returns:
            SignedTx with one (public key, signature) pair per signer

        Raises:
            SigningError: Any signer failed; no partial transaction is returned
        """
        if not signers:
            raise ValueError("At least one signer is required")

        if signer_infos is None:
            signer_infos = await self.resolve_signer_infos(signers)
        elif len(signer_infos) != len(signers):
            raise ValueError(
                f"Got {len(signer_infos)} signer infos for {len(signers)} signers"
            )

        chain_id = await self.resolve_chain_id()

        body = tx.body_bytes()
        auth_info = auth_info_bytes(fee, signer_infos)

        sign_docs = [
            SignDoc(
                body_bytes=body,
                auth_info_bytes=auth_info,
                chain_id=chain_id,
                account_number=info.account_number
            )
            for info in signer_infos
        ]

        results = await asyncio.gather(
            *(signer.key.sign(doc.to_bytes()) for signer, doc in zip(signers, sign_docs)),
            return_exceptions=True
        )

        entries = []
        for index, (signer, result) in enumerate(zip(signers, results)):
            address = signer.key.address

            if isinstance(result, BaseException):
                logger.error(f"Signer {index} ({address}) failed: {result}")
                raise SigningError(
                    f"Signer {index} ({address}) failed: {result}",
                    signer_index=index,
                    address=address
                ) from result

            if len(result) != SIGNATURE_LENGTH:
                raise SigningError(
                    f"Signer {index} ({address}) returned a {len(result)}-byte signature",
                    signer_index=index,
                    address=address
                )

            entries.append(SignatureEntry(public_key=signer.key.public_key, signature=bytes(result)))

        signed = SignedTx(
            tx=tx,
            fee=fee,
            signer_infos=tuple(signer_infos),
            signatures=tuple(entries),
            body_bytes=body,
            auth_info_bytes=auth_info
        )

        logger.debug(f"Built tx {signed.hash()} with {len(entries)} signature(s)")
        return signed
