"""Tests for the Firestore-backed filter repository."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from modules.filters import (
    Filter,
    FilterCategory,
    FilterCreate,
    FilterNotFoundError,
    FilterPermissionError,
    FilterRepository,
    FilterStoreError,
    FilterType,
    FilterValidationError,
    MissingIndexError,
)
from modules.filters.models import PROTECTED_FIELDS
from shared.exceptions import PERMISSION_DENIED_MESSAGE
from shared.firestore import FirestoreClient


DOCS = "projects/demo/databases/(default)/documents/filters"


def filter_doc(doc_id: str, name: str = "Sepia", created_at: str = "2025-01-01T00:00:00Z", **extra) -> dict:
    fields = {
        "name": {"stringValue": name},
        "description": {"stringValue": f"{name} look"},
        "prompt": {"stringValue": f"Make it {name.lower()}"},
        "previewImageUrl": {"stringValue": f"https://img.example/{doc_id}.png"},
        "category": {"stringValue": "Fun"},
        "type": {"stringValue": "single"},
        "accessCount": {"integerValue": "3"},
        "createdAt": {"timestampValue": created_at},
    }
    fields.update(extra)
    return {"name": f"{DOCS}/{doc_id}", "fields": fields}


@pytest.fixture
def make_repository(http_stub):
    """Build a FilterRepository over a stubbed transport. Returns (repo, requests)."""

    def _make(handler, page_size: int = 100):
        http, requests = http_stub(handler)
        db = FirestoreClient(project_id="demo", api_key="web-key", http=http)
        return FilterRepository(db, page_size=page_size), requests

    return _make


@pytest.fixture
def valid_create() -> FilterCreate:
    return FilterCreate(
        name="Sepia",
        description="Warm brown tones",
        prompt="Apply a sepia tone",
        preview_image_url="https://img.example/sepia.png",
        category=FilterCategory.FUN,
        user_id="u1",
        username="a@b.com",
    )


class TestListFilters:
    @pytest.mark.asyncio
    async def test_concatenates_all_pages_newest_first(self, make_repository):
        """Three pages of one record each yield three filters in createdAt-desc order."""
        pages = {
            None: {"documents": [filter_doc("c", "Third", "2025-01-03T00:00:00Z")], "nextPageToken": "t2"},
            "t2": {"documents": [filter_doc("b", "Second", "2025-01-02T00:00:00Z")], "nextPageToken": "t3"},
            "t3": {"documents": [filter_doc("a", "First", "2025-01-01T00:00:00Z")]},
        }
        repository, requests = make_repository(
            lambda request: httpx.Response(200, json=pages[request.url.params.get("pageToken")]),
            page_size=1,
        )

        filters = await repository.list_filters()

        assert [f.id for f in filters] == ["c", "b", "a"]
        created = [f.created_at for f in filters]
        assert created == sorted(created, reverse=True)
        assert len(requests) == 3
        assert all(r.url.params["orderBy"] == "createdAt desc" for r in requests)

    @pytest.mark.asyncio
    async def test_maps_document_fields(self, make_repository):
        repository, _ = make_repository(
            lambda request: httpx.Response(200, json={"documents": [
                filter_doc("f1", userId={"stringValue": "u1"}, username={"stringValue": "a@b.com"})
            ]})
        )

        [item] = await repository.list_filters()

        assert item == Filter(
            id="f1",
            name="Sepia",
            description="Sepia look",
            prompt="Make it sepia",
            preview_image_url="https://img.example/f1.png",
            category=FilterCategory.FUN,
            type=FilterType.SINGLE,
            user_id="u1",
            username="a@b.com",
            access_count=3,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )

    @pytest.mark.asyncio
    async def test_legacy_and_missing_categories(self, make_repository):
        legacy = filter_doc("old", category={"stringValue": "Trending"})
        bare = filter_doc("bare")
        del bare["fields"]["category"]
        del bare["fields"]["accessCount"]
        repository, _ = make_repository(
            lambda request: httpx.Response(200, json={"documents": [legacy, bare]})
        )

        old, plain = await repository.list_filters()

        assert old.category == FilterCategory.AI_GENERATED
        assert plain.category == FilterCategory.USEFUL
        assert plain.access_count == 0

    @pytest.mark.asyncio
    async def test_missing_index(self, make_repository, google_error):
        repository, _ = make_repository(lambda request: google_error(
            400,
            "The query requires an index. You can create it here: https://console.firebase.google.com/x",
            "FAILED_PRECONDITION",
        ))

        with pytest.raises(MissingIndexError) as exc_info:
            await repository.list_filters()

        assert "index" in exc_info.value.message
        assert "console.firebase.google.com" in exc_info.value.details["provider_message"]

    @pytest.mark.asyncio
    async def test_other_failure_carries_provider_message(self, make_repository, google_error):
        repository, _ = make_repository(lambda request: google_error(500, "backend exploded", "INTERNAL"))

        with pytest.raises(FilterStoreError) as exc_info:
            await repository.list_filters()

        assert exc_info.value.message == "Failed to load filters from the database. Details: backend exploded"


class TestGetFilter:
    @pytest.mark.asyncio
    async def test_not_found_returns_none(self, make_repository, google_error):
        repository, _ = make_repository(lambda request: google_error(404, "not found", "NOT_FOUND"))
        assert await repository.get("missing") is None

    @pytest.mark.asyncio
    async def test_found(self, make_repository):
        repository, _ = make_repository(lambda request: httpx.Response(200, json=filter_doc("f1")))
        assert (await repository.get("f1")).id == "f1"


class TestCreateFilter:
    @pytest.mark.asyncio
    async def test_missing_field_makes_no_request(self, make_repository, valid_create):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))

        with pytest.raises(FilterValidationError) as exc_info:
            await repository.create(valid_create.model_copy(update={"prompt": "  "}))

        assert exc_info.value.missing_fields == ["prompt"]
        assert "prompt" in exc_info.value.message
        assert requests == []

    @pytest.mark.asyncio
    async def test_mapping_input_validated_too(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))

        with pytest.raises(FilterValidationError) as exc_info:
            await repository.create({"name": "Only a name"})

        assert exc_info.value.missing_fields == ["description", "prompt", "previewImageUrl"]
        assert requests == []

    @pytest.mark.asyncio
    async def test_writes_single_commit_with_zero_count(self, make_repository, valid_create):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={
            "writeResults": [{
                "updateTime": "2025-01-05T10:00:00.000001Z",
                "transformResults": [{"timestampValue": "2025-01-05T10:00:00.123456789Z"}],
            }],
        }))

        created = await repository.create(valid_create, auth_token="tok")

        assert len(requests) == 1
        write = json.loads(requests[0].content)["writes"][0]
        fields = write["update"]["fields"]
        assert fields["accessCount"] == {"integerValue": "0"}
        assert fields["category"] == {"stringValue": "Fun"}
        assert fields["userId"] == {"stringValue": "u1"}
        assert "createdAt" not in fields
        assert write["updateTransforms"][0]["fieldPath"] == "createdAt"
        assert requests[0].headers["Authorization"] == "Bearer tok"

        assert len(created.id) == 20
        assert created.access_count == 0
        assert created.created_at == datetime(2025, 1, 5, 10, 0, 0, 123456, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_permission_denied(self, make_repository, valid_create, google_error):
        repository, _ = make_repository(
            lambda request: google_error(403, "Missing or insufficient permissions.", "PERMISSION_DENIED")
        )
        with pytest.raises(FilterPermissionError):
            await repository.create(valid_create, auth_token="tok")


class TestUpdateFilter:
    @pytest.mark.asyncio
    async def test_protected_fields_never_sent(self, make_repository):
        """Passing a whole Filter only transmits the editable fields."""
        repository, requests = make_repository(
            lambda request: httpx.Response(200, json=filter_doc("f1", "Renamed"))
        )
        edited = Filter(
            id="f1",
            name="Renamed",
            description="d",
            prompt="p",
            preview_image_url="https://img.example/f1.png",
            user_id="u1",
            username="a@b.com",
            access_count=99,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )

        updated = await repository.update("f1", edited, "tok")

        request = requests[0]
        mask = request.url.params.get_list("updateMask.fieldPaths")
        sent = set(json.loads(request.content)["fields"])
        assert not PROTECTED_FIELDS & set(mask)
        assert not PROTECTED_FIELDS & sent
        assert set(mask) == sent
        assert updated.name == "Renamed"

    @pytest.mark.asyncio
    async def test_only_supplied_fields_in_mask(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json=filter_doc("f1")))

        await repository.update("f1", {"name": "New", "accessCount": 5, "userId": "x"}, "tok")

        assert requests[0].url.params.get_list("updateMask.fieldPaths") == ["name"]
        assert json.loads(requests[0].content) == {"fields": {"name": {"stringValue": "New"}}}

    @pytest.mark.asyncio
    async def test_empty_update_rejected_locally(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))
        with pytest.raises(FilterValidationError):
            await repository.update("f1", {"createdAt": "x"}, "tok")
        assert requests == []

    @pytest.mark.asyncio
    async def test_blank_value_rejected_locally(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))
        with pytest.raises(FilterValidationError):
            await repository.update("f1", {"name": "  "}, "tok")
        assert requests == []

    @pytest.mark.asyncio
    async def test_missing_token_rejected_locally(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))
        with pytest.raises(FilterPermissionError):
            await repository.update("f1", {"name": "New"}, None)
        assert requests == []

    @pytest.mark.asyncio
    async def test_permission_and_not_found_are_distinct(self, make_repository, google_error):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/filters/f1"):
                return google_error(403, "Missing or insufficient permissions.", "PERMISSION_DENIED")
            return google_error(404, "No document to update", "NOT_FOUND")

        repository, _ = make_repository(handler)

        with pytest.raises(FilterPermissionError) as denied:
            await repository.update("f1", {"name": "New"}, "tok")
        with pytest.raises(FilterNotFoundError) as missing:
            await repository.update("gone", {"name": "New"}, "tok")

        assert denied.value.message == PERMISSION_DENIED_MESSAGE
        assert missing.value.message == "The filter you are trying to modify does not exist."
        assert denied.value.message != missing.value.message

    @pytest.mark.asyncio
    async def test_other_store_failure(self, make_repository, google_error):
        repository, _ = make_repository(lambda request: google_error(409, "conflict", "ABORTED"))
        with pytest.raises(FilterStoreError) as exc_info:
            await repository.update("f1", {"name": "New"}, "tok")
        assert exc_info.value.message == "Failed to update the filter. Details: conflict"


class TestDeleteFilter:
    @pytest.mark.asyncio
    async def test_delete(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))
        await repository.delete("f1", "tok")
        assert requests[0].method == "DELETE"

    @pytest.mark.asyncio
    async def test_delete_without_token(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))
        with pytest.raises(FilterPermissionError):
            await repository.delete("f1", None)
        assert requests == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, make_repository, google_error):
        repository, _ = make_repository(lambda request: google_error(404, "No document", "NOT_FOUND"))
        with pytest.raises(FilterNotFoundError):
            await repository.delete("gone", "tok")


class TestIncrementAccessCount:
    @pytest.mark.asyncio
    async def test_sends_increment_transform(self, make_repository):
        repository, requests = make_repository(lambda request: httpx.Response(200, json={}))
        await repository.increment_access_count("f1")
        write = json.loads(requests[0].content)["writes"][0]
        assert write["transform"]["document"].endswith("/filters/f1")

    @pytest.mark.asyncio
    async def test_store_error_swallowed(self, make_repository, google_error):
        repository, _ = make_repository(lambda request: google_error(403, "denied", "PERMISSION_DENIED"))
        await repository.increment_access_count("f1")

    @pytest.mark.asyncio
    async def test_network_error_swallowed(self, make_repository):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        repository, _ = make_repository(handler)
        await repository.increment_access_count("f1")
