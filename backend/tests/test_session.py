"""Tests for DriveSession — navigation, view state, selection, uploads."""

from unittest.mock import AsyncMock

import pytest

from dropzone.exceptions import BackendError, ValidationError
from dropzone.schemas.uploads import UploadFile
from dropzone.services.session import DriveSession
from dropzone.services.upload_pipeline import ACTIVE_STATES


async def _run_uploads(drive, clock, max_ticks=200):
    """Tick until no upload is active."""
    for _ in range(max_ticks):
        clock.advance(0.2)
        await drive.pipeline.tick()
        if all(e.state not in ACTIVE_STATES for e in drive.pipeline.entries()):
            return
    raise AssertionError("uploads did not finish")


class TestNavigation:
    @pytest.mark.asyncio
    async def test_load_root(self, drive, file_service, folder_service):
        docs = await folder_service.create({"Name": "Docs"})
        await file_service.create({"Name": "root.txt"})
        await file_service.create({"Name": "inside.txt", "folder_id": docs.id})

        await drive.load()

        assert [f.name for f in drive.folders] == ["Docs"]
        assert [f.name for f in drive.files] == ["root.txt"]
        assert drive.breadcrumb == []
        assert drive.current_folder_info is None

    @pytest.mark.asyncio
    async def test_open_folder_updates_breadcrumb(self, drive, folder_service):
        a = await folder_service.create({"Name": "A"})
        b = await folder_service.create({"Name": "B", "parent_id": a.id})

        await drive.open_folder(b.id)

        assert drive.current_folder == b.id
        assert [f.name for f in drive.breadcrumb] == ["A", "B"]
        assert drive.current_folder_info.id == b.id

    @pytest.mark.asyncio
    async def test_open_unknown_folder(self, drive):
        with pytest.raises(ValidationError):
            await drive.open_folder(404)
        assert drive.current_folder is None

    @pytest.mark.asyncio
    async def test_open_clears_selection(self, drive, file_service, folder_service):
        a = await folder_service.create({"Name": "A"})
        f = await file_service.create({"Name": "f"})
        await drive.load()
        assert drive.toggle_selection(f.id) is True
        await drive.open_folder(a.id)
        assert drive.selected == set()


class TestView:
    def test_defaults(self, drive):
        assert (drive.search_query, drive.sort_by, drive.view_mode) == ("", "name", "grid")

    def test_set_view(self, drive):
        drive.set_view(search_query="rep", sort_by="size", view_mode="list")
        assert (drive.search_query, drive.sort_by, drive.view_mode) == ("rep", "size", "list")

    @pytest.mark.parametrize("kwargs", [{"sort_by": "colour"}, {"view_mode": "table"}])
    def test_invalid_values_rejected(self, drive, kwargs):
        with pytest.raises(ValidationError):
            drive.set_view(**kwargs)
        assert drive.sort_by == "name"
        assert drive.view_mode == "grid"

    @pytest.mark.asyncio
    async def test_visible_files_follow_search_and_sort(self, drive, file_service):
        await file_service.create({"Name": "small-report.txt", "size": 10})
        await file_service.create({"Name": "big-report.txt", "size": 900})
        await file_service.create({"Name": "notes.txt", "size": 50})
        await drive.load()

        drive.set_view(search_query="REPORT", sort_by="size")

        assert [f.name for f in drive.visible_files()] == ["big-report.txt", "small-report.txt"]
        assert drive.snapshot().file_count == 2


class TestSelection:
    @pytest.mark.asyncio
    async def test_toggle(self, drive, file_service):
        a = await file_service.create({"Name": "a"})
        await drive.load()

        assert drive.toggle_selection(a.id) is True
        assert drive.toggle_selection(a.id) is False
        assert drive.selected == set()

    @pytest.mark.asyncio
    async def test_file_outside_current_folder_not_selected(self, drive, file_service, folder_service):
        docs = await folder_service.create({"Name": "Docs"})
        hidden = await file_service.create({"Name": "hidden", "folder_id": docs.id})
        await drive.load()

        assert drive.toggle_selection(hidden.id) is False
        assert drive.toggle_selection(999) is False
        assert drive.selected == set()
        assert await drive.delete_selected() == 0
        assert await file_service.get_by_id(hidden.id) is not None

    @pytest.mark.asyncio
    async def test_delete_selected(self, drive, file_service):
        a = await file_service.create({"Name": "a"})
        b = await file_service.create({"Name": "b"})
        c = await file_service.create({"Name": "c"})
        await drive.load()
        drive.toggle_selection(a.id)
        drive.toggle_selection(b.id)

        assert await drive.delete_selected() == 2

        assert [f.id for f in drive.files] == [c.id]
        assert drive.selected == set()
        assert drive.notifications[-1].message == "2 file(s) deleted successfully!"
        assert [f.id for f in await file_service.list()] == [c.id]

    @pytest.mark.asyncio
    async def test_delete_nothing_selected(self, drive):
        assert await drive.delete_selected() == 0
        assert len(drive.notifications) == 0

    @pytest.mark.asyncio
    async def test_delete_failure_keeps_state(self, drive, file_service):
        a = await file_service.create({"Name": "a"})
        await drive.load()
        drive.toggle_selection(a.id)
        file_service.delete = AsyncMock(side_effect=BackendError("down"))

        with pytest.raises(BackendError):
            await drive.delete_selected()

        assert drive.selected == {a.id}
        assert [f.id for f in drive.files] == [a.id]
        assert drive.notifications[-1].level == "error"


class TestCreateFolder:
    @pytest.mark.asyncio
    async def test_creates_in_current_folder(self, drive, folder_service):
        parent = await folder_service.create({"Name": "Parent"})
        await drive.open_folder(parent.id)

        folder = await drive.create_folder("  Child ")

        assert folder.name == "Child"
        assert folder.parent_id == parent.id
        assert drive.folders[-1].id == folder.id
        assert drive.notifications[-1].message == 'Folder "Child" created successfully!'

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, drive, folder_service):
        with pytest.raises(ValidationError):
            await drive.create_folder("   ")
        assert await folder_service.list() == []


class TestUploads:
    @pytest.mark.asyncio
    async def test_upload_appends_one_record(self, drive, clock, file_service):
        await drive.load()
        entry = drive.upload([UploadFile(name="photo.jpg", size=4096, type="image/jpeg")])[0]

        await _run_uploads(drive, clock)

        assert [f.name for f in drive.files] == ["photo.jpg"]
        assert drive.files[0].upload_progress == 100
        assert drive.pipeline.progress[entry.id] == 100.0
        assert drive.notifications[-1].message == "photo.jpg uploaded successfully!"

        stored = await file_service.list()
        assert len(stored) == 1
        assert stored[0].size == 4096
        assert stored[0].mime_type == "image/jpeg"

        for _ in range(6):
            clock.advance(0.2)
            await drive.pipeline.tick()
        assert entry.id not in drive.pipeline.progress
        assert len(drive.files) == 1

    @pytest.mark.asyncio
    async def test_upload_targets_current_folder(self, drive, clock, folder_service, file_service):
        docs = await folder_service.create({"Name": "Docs"})
        await drive.open_folder(docs.id)

        drive.upload([UploadFile(name="a.txt"), UploadFile(name="b.txt")])
        await _run_uploads(drive, clock)

        assert {f.name for f in await file_service.list(docs.id)} == {"a.txt", "b.txt"}
        assert (await folder_service.get_by_id(docs.id)).file_count == 2

    @pytest.mark.asyncio
    async def test_upload_survives_count_sync_failure(self, drive, clock, folder_service, file_service):
        docs = await folder_service.create({"Name": "Docs"})
        await drive.open_folder(docs.id)
        folder_service.sync_file_count = AsyncMock(side_effect=BackendError("count down"))

        entry = drive.upload([UploadFile(name="a.txt")])[0]
        await _run_uploads(drive, clock)

        assert entry.state == "completed"
        assert [f.name for f in drive.files] == ["a.txt"]
        assert drive.notifications[-1].level == "success"
        assert [f.name for f in await file_service.list(docs.id)] == ["a.txt"]

    @pytest.mark.asyncio
    async def test_snapshot_lists_uploads(self, drive):
        drive.upload([UploadFile(name="a.txt")])
        snap = drive.snapshot()
        assert len(snap.uploads) == 1
        assert snap.uploads[0].state == "pending"


class TestNotifications:
    def test_feed_is_bounded(self, file_service, folder_service):
        drive = DriveSession(file_service, folder_service, feed_size=3)
        for i in range(5):
            drive.notify("info", f"n{i}")
        assert [n.message for n in drive.notifications] == ["n2", "n3", "n4"]
