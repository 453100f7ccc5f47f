"""
领域服务模块
"""
from healthlog.domain.services.record_service import RecordService
from healthlog.domain.services.document_service import DocumentService
from healthlog.domain.services.sync_service import SyncService, SyncReport, SkippedItem

__all__ = [
    "RecordService",
    "DocumentService",
    "SyncService",
    "SyncReport",
    "SkippedItem",
]
