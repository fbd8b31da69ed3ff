from .engine import TransferEngine
from .ledger import LedgerService
from .store import AccountStore

__all__ = ["AccountStore", "LedgerService", "TransferEngine"]
