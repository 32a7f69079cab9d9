"""
LCD Package
Client façade, request dispatcher, fee estimation and transaction signing
"""

from .api_requester import APIRequester
from .config import LCDClientConfig, resolve_config
from .fee_estimator import EstimateOverrides, FeeEstimator
from .tx_builder import Signer, TransactionBuilder
from .wallet import CreateTxOptions, Wallet
from .client import LCDClient
from .log import configure_logging

__all__ = [
    'APIRequester',
    'LCDClientConfig',
    'resolve_config',
    'EstimateOverrides',
    'FeeEstimator',
    'Signer',
    'TransactionBuilder',
    'CreateTxOptions',
    'Wallet',
    'LCDClient',
    'configure_logging'
]
