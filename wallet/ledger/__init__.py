"""Ledger view-model package."""

from wallet.ledger.view_model import LedgerViewModel

__all__ = ["LedgerViewModel"]
