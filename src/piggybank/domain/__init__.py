"""Domain layer for piggybank application.

Services are resolved lazily: the database layer imports
``piggybank.domain.entities`` and ``piggybank.domain.errors``, and the
services import the database layer.
"""

_SERVICES = {
    "AccountService": "piggybank.domain.account",
    "TransactionService": "piggybank.domain.transaction",
    "RegisterService": "piggybank.domain.register",
    "BalanceService": "piggybank.domain.balance",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
