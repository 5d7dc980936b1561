"""Tests for in-memory filter/sort and display formatting."""

from datetime import datetime, timezone

import pytest

from dropzone.schemas.files import FileRecord
from dropzone.services.browse import filter_and_sort_files, name_sort_key
from dropzone.utils.formatting import file_icon, format_file_size


def _file(id, name, size=0, folder_id=None, day=1):
    return FileRecord(
        Id=id,
        Name=name,
        size=size,
        folder_id=folder_id,
        upload_date=datetime(2024, 1, day, tzinfo=timezone.utc),
    )


@pytest.fixture
def files():
    return [
        _file(1, "b.txt", size=100, day=3),
        _file(2, "A.txt", size=300, day=1),
        _file(3, "c.txt", size=200, day=2),
        _file(4, "inside.txt", size=50, folder_id=9, day=4),
    ]


class TestFilterAndSort:
    def test_sort_by_name_ignores_case(self, files):
        result = filter_and_sort_files(files, None, "", "name")
        assert [f.name for f in result] == ["A.txt", "b.txt", "c.txt"]

    def test_accented_names_sort_with_their_base_letter(self):
        files = [_file(1, "zebra.txt"), _file(2, "éclair.txt"), _file(3, "apple.txt"), _file(4, "Eagle.txt")]
        result = filter_and_sort_files(files, None, "", "name")
        assert [f.name for f in result] == ["apple.txt", "Eagle.txt", "éclair.txt", "zebra.txt"]

    def test_name_key_orders_accent_after_plain(self):
        assert name_sort_key("resume") < name_sort_key("résumé")

    def test_search_folds_non_ascii(self):
        files = [_file(1, "Übersicht.pdf"), _file(2, "other.pdf")]
        assert [f.id for f in filter_and_sort_files(files, None, "über")] == [1]

    def test_sort_by_size_descending(self, files):
        result = filter_and_sort_files(files, None, "", "size")
        assert [f.size for f in result] == [300, 200, 100]

    def test_sort_by_date_newest_first(self, files):
        result = filter_and_sort_files(files, None, "", "date")
        assert [f.id for f in result] == [1, 3, 2]

    def test_search_is_case_insensitive(self, files):
        result = filter_and_sort_files(files, None, "B.T", "name")
        assert [f.name for f in result] == ["b.txt"]

    def test_only_current_folder(self, files):
        result = filter_and_sort_files(files, 9)
        assert [f.id for f in result] == [4]

    def test_no_match(self, files):
        assert filter_and_sort_files(files, None, "zzz") == []

    def test_missing_upload_date_sorts_last(self):
        undated = FileRecord(Id=5, Name="old.txt")
        result = filter_and_sort_files([undated, _file(6, "new.txt")], None, "", "date")
        assert [f.id for f in result] == [6, 5]


class TestFormatFileSize:
    @pytest.mark.parametrize("size, label", [
        (0, "0 Bytes"),
        (-5, "0 Bytes"),
        (500, "500 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (5 * 1024 ** 3, "5 GB"),
        (2048 * 1024 ** 3, "2048 GB"),
    ])
    def test_labels(self, size, label):
        assert format_file_size(size) == label

    def test_two_decimals(self):
        assert format_file_size(1234567) == "1.18 MB"


class TestFileIcon:
    @pytest.mark.parametrize("mime, icon", [
        ("image/png", "Image"),
        ("video/mp4", "Video"),
        ("audio/mpeg", "Music"),
        ("application/pdf", "FileText"),
        ("application/zip", "Archive"),
        ("application/msword", "FileText"),
        ("application/vnd.ms-excel", "Table"),
        ("application/vnd.ms-powerpoint", "Presentation"),
        ("text/plain", "File"),
        (None, "File"),
    ])
    def test_icons(self, mime, icon):
        assert file_icon(mime) == icon

    def test_record_exposes_labels(self):
        record = FileRecord(Id=1, Name="p.png", size=2048, type="image/png")
        dumped = record.model_dump()
        assert dumped["size_label"] == "2 KB"
        assert dumped["icon"] == "Image"
