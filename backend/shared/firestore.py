"""
Firestore REST client.

Thin async wrapper over the Firestore v1 REST API, shared by every
repository. It knows about documents, field values, pagination tokens,
field masks and field transforms; it knows nothing about filters or shares.

Failed calls are turned into exceptions in one place:
- httpx transport failures, and non-2xx answers without a Google error body,
  raise TransportError
- answers with an error body raise DocumentStoreError, classified by
  classify_store_error()
"""

import re
import secrets
import string
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional

import httpx

from .exceptions import ExternalServiceError, TransportError
from .http import error_payload, read_json

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"

_AUTO_ID_ALPHABET = string.ascii_letters + string.digits
_AUTO_ID_LENGTH = 20

# Python datetimes hold microseconds; Firestore sends up to nanoseconds
_FRACTION_RE = re.compile(r"(\.\d+)")


class StoreErrorKind(str, Enum):
    """Classification of a document store failure."""

    MISSING_INDEX = "missing_index"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    OTHER = "other"


def classify_store_error(status_code: int, error: dict[str, Any]) -> StoreErrorKind:
    """
    Classify a Firestore error answer.

    The structured `status` field and the HTTP status code are preferred.
    Missing composite indexes only surface as FAILED_PRECONDITION with a
    free-text explanation, so that case still falls back to matching
    "requires an index" in the message. If Google rewords that message the
    result degrades to OTHER, which callers still report with the provider
    text attached.

    Args:
        status_code: HTTP status of the response
        error: The decoded {"code", "message", "status"} error object

    Returns:
        The StoreErrorKind for this failure
    """
    status = str(error.get("status") or "").upper()
    message = str(error.get("message") or "").lower()

    if status_code in (401, 403) or status in ("PERMISSION_DENIED", "UNAUTHENTICATED"):
        return StoreErrorKind.PERMISSION_DENIED
    if status_code == 404 or status == "NOT_FOUND":
        return StoreErrorKind.NOT_FOUND
    if "requires an index" in message:
        return StoreErrorKind.MISSING_INDEX
    if status == "FAILED_PRECONDITION" and "index" in message:
        return StoreErrorKind.MISSING_INDEX
    return StoreErrorKind.OTHER


class DocumentStoreError(ExternalServiceError):
    """The document store answered with a structured error."""

    def __init__(
        self,
        kind: StoreErrorKind,
        message: str,
        status_code: int,
        status: Optional[str] = None,
    ):
        super().__init__(
            message,
            service="firestore",
            code=f"STORE_{kind.value.upper()}",
            details={"status_code": status_code, "status": status},
        )
        self.kind = kind
        self.status_code = status_code
        self.status = status

    @classmethod
    def from_error(cls, status_code: int, error: dict[str, Any]) -> "DocumentStoreError":
        return cls(
            kind=classify_store_error(status_code, error),
            message=str(error.get("message") or f"HTTP {status_code}"),
            status_code=status_code,
            status=error.get("status"),
        )


# -----------------------------------------------------------------------------
# Value codec
# -----------------------------------------------------------------------------


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an RFC 3339 UTC timestamp."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as returned by Firestore (nanosecond precision)."""
    value = _FRACTION_RE.sub(lambda m: m.group(1)[:7], value.replace("Z", "+00:00"))
    return datetime.fromisoformat(value)


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a Python value as a Firestore Value object."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, Enum):
        return encode_value(value.value)
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def decode_value(value: dict[str, Any]) -> Any:
    """Decode a Firestore Value object into a Python value."""
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "timestampValue" in value:
        return parse_timestamp(value["timestampValue"])
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    return None


def encode_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {key: encode_value(value) for key, value in data.items()}


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(value) for key, value in fields.items()}


def document_id(document: dict[str, Any]) -> str:
    """Return the last path segment of a document's resource name."""
    return str(document.get("name", "")).rsplit("/", 1)[-1]


def auto_id() -> str:
    """Generate a 20-character document id, as the Firestore SDKs do."""
    return "".join(secrets.choice(_AUTO_ID_ALPHABET) for _ in range(_AUTO_ID_LENGTH))


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------


class FirestoreClient:
    """
    Async client for the Firestore REST API.

    Requests are keyed with the project's web API key. Operations that
    security rules restrict take an optional bearer token (a Firebase ID
    token) which is sent as an Authorization header.
    """

    def __init__(
        self,
        project_id: str,
        api_key: str,
        http: httpx.AsyncClient,
        database: str = "(default)",
        base_url: str = FIRESTORE_BASE_URL,
    ) -> None:
        self._project_id = project_id
        self._api_key = api_key
        self._http = http
        self._database = database
        self._base_url = base_url.rstrip("/")

    @property
    def documents_path(self) -> str:
        return f"projects/{self._project_id}/databases/{self._database}/documents"

    def document_name(self, collection: str, doc_id: str) -> str:
        return f"{self.documents_path}/{collection}/{doc_id}"

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_documents(
        self,
        collection: str,
        order_by: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> tuple[list[dict[str, Any]], Optional[str]]:
        """
        Fetch one page of a collection.

        Returns:
            Tuple of (documents, next_page_token). The token is None on the
            last page.
        """
        params: list[tuple[str, str]] = []
        if order_by:
            params.append(("orderBy", order_by))
        if page_size:
            params.append(("pageSize", str(page_size)))
        if page_token:
            params.append(("pageToken", page_token))

        response = await self._request(
            "GET",
            f"{self.documents_path}/{collection}",
            params=params,
        )
        data = read_json(response)
        return data.get("documents", []), data.get("nextPageToken") or None

    async def list_all_documents(
        self,
        collection: str,
        order_by: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch a whole collection, following page tokens until exhausted.

        Pages are concatenated in the order the store returned them. No
        snapshot is held across pages: writes that land mid-listing may or
        may not be included.
        """
        documents: list[dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            page, page_token = await self.list_documents(
                collection,
                order_by=order_by,
                page_size=page_size,
                page_token=page_token,
            )
            documents.extend(page)
            if not page_token:
                return documents

    async def get_document(
        self,
        collection: str,
        doc_id: str,
        token: Optional[str] = None,
    ) -> dict[str, Any]:
        response = await self._request(
            "GET",
            f"{self.documents_path}/{collection}/{doc_id}",
            token=token,
        )
        return read_json(response)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_document(
        self,
        collection: str,
        data: dict[str, Any],
        doc_id: Optional[str] = None,
        server_timestamps: Iterable[str] = (),
        token: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Create a document in a single atomic commit.

        Fields named in server_timestamps are set to the commit time by the
        store. The returned document has those fields filled in from the
        commit's transform results.

        Args:
            collection: Collection id
            data: Plain Python field values
            doc_id: Document id; a random auto-id when omitted
            server_timestamps: Field paths to set to the server's request time
            token: Optional bearer token

        Returns:
            The created document in REST form ({"name", "fields", ...})
        """
        doc_id = doc_id or auto_id()
        name = self.document_name(collection, doc_id)
        fields = encode_fields(data)
        timestamp_fields = list(server_timestamps)

        write: dict[str, Any] = {
            "update": {"name": name, "fields": fields},
            "currentDocument": {"exists": False},
        }
        if timestamp_fields:
            write["updateTransforms"] = [
                {"fieldPath": field, "setToServerValue": "REQUEST_TIME"}
                for field in timestamp_fields
            ]

        result = await self.commit([write], token=token)

        write_result = (result.get("writeResults") or [{}])[0]
        commit_time = write_result.get("updateTime") or result.get("commitTime")
        transform_results = write_result.get("transformResults") or []
        for field, value in zip(timestamp_fields, transform_results):
            fields[field] = value
        for field in timestamp_fields:
            if field not in fields and commit_time:
                fields[field] = {"timestampValue": commit_time}

        return {
            "name": name,
            "fields": fields,
            "createTime": commit_time,
            "updateTime": commit_time,
        }

    async def patch_document(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        field_mask: Iterable[str],
        token: Optional[str] = None,
        must_exist: bool = True,
    ) -> dict[str, Any]:
        """
        Partially update a document.

        Only the paths in field_mask are written; every other field of the
        stored document is left untouched.

        Returns:
            The full document as stored after the update
        """
        params = [("updateMask.fieldPaths", path) for path in field_mask]
        if must_exist:
            params.append(("currentDocument.exists", "true"))

        response = await self._request(
            "PATCH",
            f"{self.documents_path}/{collection}/{doc_id}",
            params=params,
            json={"fields": encode_fields(data)},
            token=token,
        )
        return read_json(response)

    async def delete_document(
        self,
        collection: str,
        doc_id: str,
        token: Optional[str] = None,
        must_exist: bool = True,
    ) -> None:
        params = [("currentDocument.exists", "true")] if must_exist else []
        await self._request(
            "DELETE",
            f"{self.documents_path}/{collection}/{doc_id}",
            params=params,
            token=token,
        )

    async def increment(
        self,
        collection: str,
        doc_id: str,
        field: str,
        amount: int = 1,
        token: Optional[str] = None,
    ) -> None:
        """Atomically add amount to a numeric field, server side."""
        write = {
            "transform": {
                "document": self.document_name(collection, doc_id),
                "fieldTransforms": [
                    {"fieldPath": field, "increment": {"integerValue": str(amount)}},
                ],
            },
            "currentDocument": {"exists": True},
        }
        await self.commit([write], token=token)

    async def commit(
        self,
        writes: list[dict[str, Any]],
        token: Optional[str] = None,
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"{self.documents_path}:commit",
            json={"writes": writes},
            token=token,
        )
        return read_json(response)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[list[tuple[str, str]]] = None,
        json: Optional[dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> httpx.Response:
        query = [("key", self._api_key), *(params or [])]
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        try:
            response = await self._http.request(
                method,
                f"{self._base_url}/{path}",
                params=query,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError("firestore", str(e) or type(e).__name__)

        if response.is_success:
            return response

        error = error_payload(response)
        if not error:
            raise TransportError(
                "firestore",
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        raise DocumentStoreError.from_error(response.status_code, error)
