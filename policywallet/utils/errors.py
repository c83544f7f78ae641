"""
Custom Exceptions
Wallet-specific error handling
"""

from typing import Optional


class WalletError(Exception):
    """Base exception for wallet errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class StorageError(WalletError):
    """Raised when the key-value store cannot be read or written."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, original_error)
        self.key = key


class PortfolioNotFoundError(WalletError):
    """Raised when a user has no stored portfolio."""

    def __init__(self, user_id: str):
        super().__init__(f"Portfolio not found for user {user_id}")
        self.user_id = user_id


class PolicyNotFoundError(WalletError):
    """Raised when a policy id is not in the portfolio."""

    def __init__(self, policy_id: str):
        super().__init__(f"Policy not found: {policy_id}")
        self.policy_id = policy_id


class DocumentError(WalletError):
    """Raised when document metadata is rejected."""

    pass


class DocumentNotFoundError(DocumentError):
    """Raised when a document id is not attached to the policy."""

    def __init__(self, document_id: str):
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


class AnalysisGatewayError(WalletError):
    """Raised when the external analysis service fails."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, original_error)
        self.provider = provider
