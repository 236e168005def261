"""Block explorer — chain data models, privacy classifier, simulated decryption."""

from zcash_analytics.explorer.classifier import classify_transaction
from zcash_analytics.explorer.client import ZcashBlockExplorer
from zcash_analytics.explorer.decryptor import Decryptor, SimulatedDecryptor
from zcash_analytics.explorer.models import (
    Block,
    PrivacyLevel,
    PrivacyReport,
    ShieldedTransaction,
    Transaction,
)

__all__ = [
    "Block",
    "Decryptor",
    "PrivacyLevel",
    "PrivacyReport",
    "ShieldedTransaction",
    "SimulatedDecryptor",
    "Transaction",
    "ZcashBlockExplorer",
    "classify_transaction",
]
