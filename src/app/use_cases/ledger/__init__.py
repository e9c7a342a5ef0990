"""Account ledger use cases"""
from .apply_credit_delta import ApplyCreditDelta
from .get_account import GetAccount
from .check_balance import CheckBalance
from .list_transactions import ListTransactions
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    ApplyDeltaCommandDTO,
    CreditTransactionResponseDTO,
    AccountResponseDTO,
    CheckBalanceResponseDTO,
    TransactionDTO,
    ListTransactionsResponseDTO,
    AccountDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "ApplyCreditDelta",
    "GetAccount",
    "CheckBalance",
    "ListTransactions",
    "ReconcileLedger",
    "ApplyDeltaCommandDTO",
    "CreditTransactionResponseDTO",
    "AccountResponseDTO",
    "CheckBalanceResponseDTO",
    "TransactionDTO",
    "ListTransactionsResponseDTO",
    "AccountDiscrepancyDTO",
    "ReconciliationResultDTO",
]
