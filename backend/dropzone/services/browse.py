"""Filter/sort of an in-memory file collection for the current folder."""

from __future__ import annotations

import locale
import unicodedata
from typing import Iterable

from dropzone.records import RecordId
from dropzone.schemas.files import FileRecord

SORT_KEYS = ("name", "size", "date")
VIEW_MODES = ("grid", "list")


def _base_letters(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def name_sort_key(name: str) -> tuple[str, str, str]:
    """Collation key under LC_COLLATE.

    Base letters decide first, so ``éclair`` sorts with the e's even in
    the C locale; accents, then exact spelling, break ties.
    """
    return (
        locale.strxfrm(_base_letters(name)),
        locale.strxfrm(name.casefold()),
        locale.strxfrm(name),
    )


def _upload_ts(file: FileRecord) -> float:
    return file.upload_date.timestamp() if file.upload_date else float("-inf")


def filter_and_sort_files(
    files: Iterable[FileRecord],
    folder_id: RecordId | None,
    search_text: str = "",
    sort_by: str = "name",
) -> list[FileRecord]:
    """Files in ``folder_id`` whose name contains ``search_text``, sorted.

    ``sort_by``: ``name`` ascending, ``size`` descending, ``date`` (upload
    date) descending. Unknown keys sort by name.
    """
    needle = (search_text or "").casefold()
    visible = [
        f for f in files
        if f.folder_id == folder_id and needle in f.name.casefold()
    ]
    if sort_by == "size":
        return sorted(visible, key=lambda f: f.size, reverse=True)
    if sort_by == "date":
        return sorted(visible, key=_upload_ts, reverse=True)
    return sorted(visible, key=lambda f: name_sort_key(f.name))
