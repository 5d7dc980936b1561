"""Service registry — one record client injected into every service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dropzone.config import settings

if TYPE_CHECKING:
    from dropzone.records import RecordClient
    from dropzone.services.file_service import FileService
    from dropzone.services.folder_service import FolderService
    from dropzone.services.scheduler import UploadTicker
    from dropzone.services.session import DriveSession

logger = logging.getLogger(__name__)

_record_client: RecordClient | None = None
_folder_service: FolderService | None = None
_file_service: FileService | None = None
_session: DriveSession | None = None
_ticker: UploadTicker | None = None


def build_record_client() -> RecordClient:
    """Record client for the configured backend."""
    if settings.uses_http_backend:
        from dropzone.records import HttpRecordClient

        return HttpRecordClient(
            base_url=settings.record_api_url,
            project_id=settings.record_project_id,
            public_key=settings.record_public_key,
            timeout=settings.record_timeout_seconds,
        )

    from dropzone.database import async_session
    from dropzone.records import SqlRecordClient

    return SqlRecordClient(async_session, actor=settings.app_name)


async def init_services(client: RecordClient | None = None, *, start_ticker: bool = True) -> None:
    """Create and wire up all services around one record client."""
    global _record_client, _folder_service, _file_service, _session, _ticker

    from dropzone.services.file_service import FileService
    from dropzone.services.folder_service import FolderService
    from dropzone.services.scheduler import UploadTicker
    from dropzone.services.session import DriveSession

    _record_client = client or build_record_client()
    _folder_service = FolderService(_record_client)
    _file_service = FileService(_record_client, folder_service=_folder_service)
    _session = DriveSession(
        _file_service,
        _folder_service,
        feed_size=settings.notification_feed_size,
        max_increment=settings.upload_max_increment,
        clear_delay=settings.upload_clear_delay_seconds,
    )
    await _session.load()
    logger.info("Services initialized (%s record backend)", settings.record_backend)

    if start_ticker:
        _ticker = UploadTicker(_session.pipeline, settings.upload_tick_seconds)
        _ticker.start()


async def shutdown_services() -> None:
    """Stop the upload ticker and release the record client."""
    global _record_client, _folder_service, _file_service, _session, _ticker
    if _ticker:
        await _ticker.stop()
        _ticker = None
    if _record_client:
        await _record_client.close()
    _record_client = _folder_service = _file_service = _session = None


def get_folder_service() -> FolderService:
    if _folder_service is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _folder_service


def get_file_service() -> FileService:
    if _file_service is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _file_service


def get_session() -> DriveSession:
    if _session is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _session
