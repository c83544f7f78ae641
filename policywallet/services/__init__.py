"""
Services Layer for the Policy Wallet.

Exports the lifecycle classifier, aggregation engine, tax calculator,
storage and document vault.
"""

from policywallet.services.document_vault import DocumentVault
from policywallet.services.policy_status import classify_status, is_in_force, today_local
from policywallet.services.portfolio_aggregator import (
    PortfolioAggregator,
    get_portfolio_aggregator,
    summarize_portfolio,
)
from policywallet.services.portfolio_repository import (
    PortfolioRepository,
    get_portfolio_repository,
)
from policywallet.services.storage import (
    InMemoryStore,
    KeyValueStore,
    RedisStore,
    StorageManager,
    create_store,
)
from policywallet.services.tax_calculator import TaxCalculator, compute_tax, get_tax_calculator

__all__ = [
    "DocumentVault",
    "classify_status",
    "is_in_force",
    "today_local",
    "PortfolioAggregator",
    "get_portfolio_aggregator",
    "summarize_portfolio",
    "PortfolioRepository",
    "get_portfolio_repository",
    "InMemoryStore",
    "KeyValueStore",
    "RedisStore",
    "StorageManager",
    "create_store",
    "TaxCalculator",
    "compute_tax",
    "get_tax_calculator",
]
