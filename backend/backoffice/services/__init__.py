from .ledger import (
    apply_client_movement,
    apply_vendor_movement,
    release_client_balance,
    release_vendor_payable,
)

__all__ = [
    "apply_client_movement",
    "apply_vendor_movement",
    "release_client_balance",
    "release_vendor_payable",
]
