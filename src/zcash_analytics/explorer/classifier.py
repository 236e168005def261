"""Transaction privacy classifier.

Labels a fetched transaction as fully shielded, partially shielded or
transparent. No viewing key is involved: the decision only looks at which
component arrays are populated. First match wins:

1. Sapling/Orchard components and no transparent ones  -> full
2. Sapling/Orchard components and transparent ones     -> partial
3. Sprout joinsplits only                              -> partial
4. anything else                                       -> transparent
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zcash_analytics.explorer.models import PrivacyLevel, PrivacyReport

if TYPE_CHECKING:
    from zcash_analytics.explorer.models import Transaction

DETAIL_FULL = "Fully shielded transaction (Sapling/Orchard)"
DETAIL_PARTIAL = "Partially shielded transaction"
DETAIL_MIXED = "Contains both transparent and shielded components"
DETAIL_SPROUT = "Legacy Sprout shielded transaction"
DETAIL_TRANSPARENT = "Fully transparent transaction"


def classify_transaction(tx: Transaction) -> PrivacyReport:
    """Return the shielding level of *tx*. Pure: same input, same report."""
    match (tx.has_sapling, tx.has_transparent, tx.has_sprout):
        case (True, False, _):
            return PrivacyReport(True, PrivacyLevel.FULL, (DETAIL_FULL,))
        case (True, True, _):
            return PrivacyReport(True, PrivacyLevel.PARTIAL, (DETAIL_PARTIAL, DETAIL_MIXED))
        case (False, _, True):
            return PrivacyReport(True, PrivacyLevel.PARTIAL, (DETAIL_SPROUT,))
        case _:
            return PrivacyReport(False, PrivacyLevel.TRANSPARENT, (DETAIL_TRANSPARENT,))
