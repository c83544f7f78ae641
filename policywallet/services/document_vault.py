"""
Policy Document Vault.

Tracks metadata of files attached to policies (id, name, category, MIME
type, URL, upload date). File bytes are uploaded to and served by the blob
store; this service never touches them.
"""

from datetime import datetime, timezone
from typing import Optional

from policywallet.core.config import get_settings
from policywallet.core.enums import DocumentCategory
from policywallet.schemas.policy import PolicyDocument
from policywallet.services.portfolio_repository import (
    PortfolioRepository,
    get_portfolio_repository,
)
from policywallet.utils.errors import DocumentError, DocumentNotFoundError
from policywallet.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Content Type Validation
# =============================================================================

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/heic",
    "image/webp",
}


def validate_content_type(content_type: str) -> bool:
    """Validate if content type is allowed in the vault."""
    return content_type.lower() in ALLOWED_CONTENT_TYPES


# =============================================================================
# Document Vault
# =============================================================================


class DocumentVault:
    """Attaches and detaches document metadata on stored policies."""

    def __init__(
        self,
        repository: Optional[PortfolioRepository] = None,
        max_size_bytes: Optional[int] = None,
    ):
        self.repository = repository or get_portfolio_repository()
        self.max_size_bytes = (
            max_size_bytes
            if max_size_bytes is not None
            else get_settings().document_max_size_bytes
        )

    def attach(
        self,
        user_id: str,
        policy_id: str,
        name: str,
        mime_type: str,
        url: str,
        category: DocumentCategory = DocumentCategory.OTHER,
        size: Optional[int] = None,
    ) -> PolicyDocument:
        """
        Record an uploaded file against a policy.

        Raises:
            DocumentError: Content type not allowed or file too large
            PolicyNotFoundError: Unknown policy
        """
        if not validate_content_type(mime_type):
            raise DocumentError(f"Content type not allowed: {mime_type}")
        if size is not None and size > self.max_size_bytes:
            raise DocumentError(
                f"File too large: {size} bytes (max {self.max_size_bytes})"
            )

        policy = self.repository.get_policy(user_id, policy_id)
        document = PolicyDocument(
            name=name,
            category=category,
            mime_type=mime_type.lower(),
            url=url,
            size=size,
            upload_date=datetime.now(timezone.utc),
        )
        policy.documents.append(document)
        self.repository.update_policy(user_id, policy)

        logger.info(f"Document attached: policy={policy_id}, document={document.id}, name={name}")
        return document

    def detach(self, user_id: str, policy_id: str, document_id: str) -> PolicyDocument:
        """Remove document metadata and return it so the caller can delete the blob."""
        policy = self.repository.get_policy(user_id, policy_id)
        for index, document in enumerate(policy.documents):
            if document.id == document_id:
                del policy.documents[index]
                self.repository.update_policy(user_id, policy)
                logger.info(f"Document detached: policy={policy_id}, document={document_id}")
                return document
        raise DocumentNotFoundError(document_id)

    def list_documents(
        self,
        user_id: str,
        policy_id: Optional[str] = None,
        category: Optional[DocumentCategory] = None,
    ) -> list[PolicyDocument]:
        """Documents of one policy (or all policies), newest first."""
        if policy_id is not None:
            policies = [self.repository.get_policy(user_id, policy_id)]
        else:
            policies = self.repository.get_portfolio(user_id).policies

        documents = [
            d
            for p in policies
            for d in p.documents
            if category is None or d.category == category
        ]
        return sorted(documents, key=lambda d: d.upload_date, reverse=True)
