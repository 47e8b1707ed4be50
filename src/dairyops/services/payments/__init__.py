"""Customer payments and balances."""

from .ledger import CustomerBalance, customer_balance, list_payments, record_payment, refresh_customer_balance

__all__ = ["CustomerBalance", "customer_balance", "list_payments", "record_payment", "refresh_customer_balance"]
