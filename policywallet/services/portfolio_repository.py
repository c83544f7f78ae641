"""
Per-User Portfolio Repository.

Each user's policies and profile live under one JSON blob
``<prefix>portfolio:<user_id>`` with a ``lastSync`` timestamp. Saving
policies or the profile is an upsert that leaves the other half untouched.
"""

import json
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from policywallet.core.config import get_settings
from policywallet.schemas.policy import Policy
from policywallet.schemas.portfolio import StoredPortfolio
from policywallet.schemas.profile import UserProfile
from policywallet.services.storage import KeyValueStore, create_store, dumps
from policywallet.utils.errors import PolicyNotFoundError, PortfolioNotFoundError, StorageError
from policywallet.utils.logging import get_logger

logger = get_logger(__name__)


class PortfolioRepository:
    """Reads and upserts stored portfolios keyed by user id."""

    def __init__(self, store: Optional[KeyValueStore] = None, prefix: Optional[str] = None):
        settings = get_settings()
        self.store = store if store is not None else create_store(settings)
        self.prefix = prefix if prefix is not None else settings.STORAGE_KEY_PREFIX

    def key(self, user_id: str) -> str:
        if not user_id:
            raise ValueError("User ID required")
        return f"{self.prefix}portfolio:{user_id}"

    def _read(self, user_id: str) -> Optional[StoredPortfolio]:
        raw = self.store.get(self.key(user_id))
        if raw is None:
            return None
        try:
            return StoredPortfolio.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError(
                f"Stored portfolio for {user_id} is invalid", key=self.key(user_id), original_error=e
            ) from e

    def _write(self, user_id: str, portfolio: StoredPortfolio) -> StoredPortfolio:
        portfolio.last_sync = datetime.now(timezone.utc)
        self.store.set(self.key(user_id), dumps(portfolio))
        logger.info(
            f"Portfolio synced: user={user_id}, policies={len(portfolio.policies)}, "
            f"profile={'yes' if portfolio.profile else 'no'}"
        )
        return portfolio

    # =========================================================================
    # Whole-portfolio operations
    # =========================================================================

    def get_portfolio(self, user_id: str) -> StoredPortfolio:
        """Stored portfolio, or an empty one for unknown users."""
        return self._read(user_id) or StoredPortfolio()

    def get_public_view(self, user_id: str) -> StoredPortfolio:
        """Read-only view for sharing; unknown users are an error."""
        portfolio = self._read(user_id)
        if portfolio is None:
            raise PortfolioNotFoundError(user_id)
        return portfolio

    def save_policies(self, user_id: str, policies: list[Policy]) -> StoredPortfolio:
        portfolio = self.get_portfolio(user_id)
        portfolio.policies = list(policies)
        return self._write(user_id, portfolio)

    def save_profile(self, user_id: str, profile: UserProfile) -> StoredPortfolio:
        portfolio = self.get_portfolio(user_id)
        portfolio.profile = profile
        return self._write(user_id, portfolio)

    def delete_portfolio(self, user_id: str) -> None:
        self.store.delete(self.key(user_id))

    def export_json(self, user_id: str) -> str:
        """Portfolio in the client wire format, pretty printed."""
        return json.dumps(
            self.get_public_view(user_id).to_json_dict(), indent=2, ensure_ascii=False
        )

    # =========================================================================
    # Policy operations
    # =========================================================================

    def get_policy(self, user_id: str, policy_id: str) -> Policy:
        for policy in self.get_portfolio(user_id).policies:
            if policy.id == policy_id:
                return policy
        raise PolicyNotFoundError(policy_id)

    def add_policy(self, user_id: str, policy: Policy) -> Policy:
        portfolio = self.get_portfolio(user_id)
        portfolio.policies.append(policy)
        self._write(user_id, portfolio)
        return policy

    def update_policy(self, user_id: str, policy: Policy) -> Policy:
        portfolio = self.get_portfolio(user_id)
        for index, existing in enumerate(portfolio.policies):
            if existing.id == policy.id:
                portfolio.policies[index] = policy
                self._write(user_id, portfolio)
                return policy
        raise PolicyNotFoundError(policy.id)

    def remove_policy(self, user_id: str, policy_id: str) -> None:
        portfolio = self.get_portfolio(user_id)
        remaining = [p for p in portfolio.policies if p.id != policy_id]
        if len(remaining) == len(portfolio.policies):
            raise PolicyNotFoundError(policy_id)
        portfolio.policies = remaining
        self._write(user_id, portfolio)


# Singleton instance
_portfolio_repository: Optional[PortfolioRepository] = None


def get_portfolio_repository() -> PortfolioRepository:
    """Get or create the singleton repository over the configured store."""
    global _portfolio_repository
    if _portfolio_repository is None:
        _portfolio_repository = PortfolioRepository()
    return _portfolio_repository
