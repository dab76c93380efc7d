from app.services.admin_content_service import (
    AdminContentService,
    AdminPage,
    BulkDeleteResult,
    MutationResult,
    Reconciliation,
)
from app.services.resolution_service import ContentResolver
from app.services.sync_service import SyncResult, SyncService

__all__ = [
    "AdminContentService",
    "AdminPage",
    "BulkDeleteResult",
    "ContentResolver",
    "MutationResult",
    "Reconciliation",
    "SyncResult",
    "SyncService",
]
