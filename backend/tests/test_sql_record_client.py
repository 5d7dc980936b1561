"""Tests for SqlRecordClient — filter semantics, write results, failures."""

import pytest

from dropzone.records import FetchParams, FilterOperator, OrderBy, SortType, WhereCondition

FIELDS = ["Name", "folder_id", "size"]


async def _seed(client):
    resp = await client.create_record("file1", [
        {"Name": "beta.txt", "size": 10, "folder_id": None},
        {"Name": "Alpha.pdf", "size": 30, "folder_id": 7},
        {"Name": "gamma_report.doc", "size": 20, "folder_id": 7},
    ])
    return [r.data["Id"] for r in resp.results]


@pytest.mark.asyncio
async def test_create_assigns_ids_and_audit_fields(record_client):
    resp = await record_client.create_record("file1", [{"Name": "a.txt", "size": 1}])
    assert resp.success is True
    result = resp.results[0]
    assert result.success is True
    assert isinstance(result.data["Id"], int)
    assert result.data["CreatedBy"] == "tests"
    assert result.data["CreatedOn"] is not None
    assert result.data["CreatedOn"].tzinfo is not None


@pytest.mark.asyncio
async def test_exact_match(record_client):
    await _seed(record_client)
    resp = await record_client.fetch_records("file1", FetchParams(
        fields=FIELDS,
        where=[WhereCondition(field_name="folder_id", operator=FilterOperator.EXACT_MATCH, values=[7])],
    ))
    assert {r["Name"] for r in resp.data} == {"Alpha.pdf", "gamma_report.doc"}


@pytest.mark.asyncio
async def test_does_not_have_value(record_client):
    await _seed(record_client)
    resp = await record_client.fetch_records("file1", FetchParams(
        fields=FIELDS,
        where=[WhereCondition(field_name="folder_id", operator=FilterOperator.DOES_NOT_HAVE_VALUE)],
    ))
    assert [r["Name"] for r in resp.data] == ["beta.txt"]


@pytest.mark.asyncio
async def test_contains_is_case_insensitive_and_escaped(record_client):
    await _seed(record_client)
    resp = await record_client.fetch_records("file1", FetchParams(
        fields=FIELDS,
        where=[WhereCondition(field_name="Name", operator=FilterOperator.CONTAINS, values=["ALPHA"])],
    ))
    assert [r["Name"] for r in resp.data] == ["Alpha.pdf"]

    # "_" is a literal, not a LIKE wildcard
    resp = await record_client.fetch_records("file1", FetchParams(
        fields=FIELDS,
        where=[WhereCondition(field_name="Name", operator=FilterOperator.CONTAINS, values=["a_r"])],
    ))
    assert [r["Name"] for r in resp.data] == ["gamma_report.doc"]


@pytest.mark.asyncio
async def test_contains_folds_non_ascii_case(record_client):
    await record_client.create_record("file1", [{"Name": "Übersicht.pdf"}, {"Name": "STRASSE.txt"}])

    resp = await record_client.fetch_records("file1", FetchParams(
        fields=FIELDS,
        where=[WhereCondition(field_name="Name", operator=FilterOperator.CONTAINS, values=["über"])],
    ))
    assert [r["Name"] for r in resp.data] == ["Übersicht.pdf"]

    # casefold("ß") == "ss"
    resp = await record_client.fetch_records("file1", FetchParams(
        fields=FIELDS,
        where=[WhereCondition(field_name="Name", operator=FilterOperator.CONTAINS, values=["straße"])],
    ))
    assert [r["Name"] for r in resp.data] == ["STRASSE.txt"]


@pytest.mark.asyncio
async def test_order_by_name_ignores_case(record_client):
    await _seed(record_client)
    resp = await record_client.fetch_records("file1", FetchParams(
        fields=FIELDS,
        order_by=[OrderBy(field_name="Name", sort_type=SortType.ASC)],
    ))
    assert [r["Name"] for r in resp.data] == ["Alpha.pdf", "beta.txt", "gamma_report.doc"]


@pytest.mark.asyncio
async def test_fetch_returns_only_requested_fields(record_client):
    await _seed(record_client)
    resp = await record_client.fetch_records("file1", FetchParams(fields=["Name"]))
    assert set(resp.data[0]) == {"Id", "Name"}


@pytest.mark.asyncio
async def test_unknown_field_reports_failure(record_client):
    resp = await record_client.fetch_records("file1", FetchParams(fields=["nope"]))
    assert resp.success is False
    assert "nope" in resp.message


@pytest.mark.asyncio
async def test_unknown_table_reports_failure(record_client):
    resp = await record_client.fetch_records("missing", FetchParams(fields=["Name"]))
    assert resp.success is False


@pytest.mark.asyncio
async def test_get_missing_record_has_no_data(record_client):
    resp = await record_client.get_record_by_id("folder1", 999, ["Name"])
    assert resp.success is True
    assert resp.data is None


@pytest.mark.asyncio
async def test_create_rejects_read_only_fields(record_client):
    resp = await record_client.create_record("folder1", [{"Name": "x", "CreatedBy": "mallory"}])
    assert resp.results[0].success is False
    assert "read-only" in resp.results[0].message


@pytest.mark.asyncio
async def test_create_without_name_fails_that_record_only(record_client):
    resp = await record_client.create_record("folder1", [{"file_count": 0}, {"Name": "ok"}])
    assert [r.success for r in resp.results] == [False, True]

    listing = await record_client.fetch_records("folder1", FetchParams(fields=["Name"]))
    assert [r["Name"] for r in listing.data] == ["ok"]


@pytest.mark.asyncio
async def test_update_requires_existing_id(record_client):
    resp = await record_client.update_record("file1", [{"Id": 404, "Name": "x"}])
    assert resp.results[0].success is False
    assert "not found" in resp.results[0].message

    resp = await record_client.update_record("file1", [{"Name": "x"}])
    assert resp.results[0].success is False


@pytest.mark.asyncio
async def test_update_changes_fields_and_modified_on(record_client):
    ids = await _seed(record_client)
    resp = await record_client.update_record("file1", [{"Id": ids[0], "Name": "renamed.txt"}])
    data = resp.results[0].data
    assert data["Name"] == "renamed.txt"
    assert data["ModifiedOn"] >= data["CreatedOn"]


@pytest.mark.asyncio
async def test_delete_reports_missing_ids(record_client):
    ids = await _seed(record_client)
    resp = await record_client.delete_record("file1", [ids[0], 999])
    assert resp.success is True
    assert [r.success for r in resp.results] == [True, False]

    listing = await record_client.fetch_records("file1", FetchParams(fields=["Name"]))
    assert len(listing.data) == 2
