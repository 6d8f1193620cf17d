"""
Document store

Every piece of per-user state lives in a document addressed by a collection
path and a document id:

- users/{uid}                          achievements, badges, points, profile
- users/{uid}/quiz_history/{attempt}   one document per quiz attempt
- users/{uid}/notifications/{id}       one document per notification

Two implementations share the DocumentStore interface:
- PostgresDocumentStore: JSONB rows in the `documents` table
- InMemoryDocumentStore: process-local dicts for tests and local runs
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import uuid4

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from quizhub.db.connection import Database
from quizhub.exceptions import RecordNotFoundError, ValidationError, wrap_external_exception

logger = logging.getLogger(__name__)

_DIRECTIONS = {"asc": "ASC", "desc": "DESC"}


@dataclass
class Document:
    """A stored document: its id plus its data"""
    id: str
    data: dict[str, Any] = field(default_factory=dict)


def _normalize_direction(direction: str) -> str:
    normalized = direction.lower()
    if normalized not in _DIRECTIONS:
        raise ValidationError(
            "Sort direction must be 'asc' or 'desc'",
            field="direction",
            value=direction
        )
    return normalized


class DocumentStore(ABC):
    """Minimal document database contract used by the gamification engine"""

    @abstractmethod
    async def get_document(self, collection_path: str, doc_id: str) -> Optional[Document]:
        """Return the document, or None when it does not exist"""

    @abstractmethod
    async def set_document(
        self,
        collection_path: str,
        doc_id: str,
        data: dict[str, Any],
        merge: bool = False
    ) -> None:
        """Create or replace a document; merge=True keeps unspecified top-level fields"""

    @abstractmethod
    async def update_document(self, collection_path: str, doc_id: str, data: dict[str, Any]) -> None:
        """Merge fields into an existing document (RecordNotFoundError if absent)"""

    @abstractmethod
    async def query_collection(
        self,
        collection_path: str,
        order_by: str,
        direction: str = "desc",
        limit: Optional[int] = None
    ) -> list[Document]:
        """List documents ordered by a top-level field; documents missing it sort last"""

    @abstractmethod
    async def add_document(self, collection_path: str, data: dict[str, Any]) -> str:
        """Insert a document under a generated id and return the id"""


class PostgresDocumentStore(DocumentStore):
    """Document store backed by a JSONB table"""

    def __init__(self, database: Database):
        self.database = database

    async def get_document(self, collection_path: str, doc_id: str) -> Optional[Document]:
        try:
            async with self.database.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        SELECT doc_id, data
                        FROM documents
                        WHERE collection_path = %s AND doc_id = %s
                        """,
                        (collection_path, doc_id)
                    )
                    row = await cur.fetchone()
        except psycopg.Error as e:
            raise wrap_external_exception(
                e, operation="get_document", context={"collection": collection_path, "doc_id": doc_id}
            ) from e

        if not row:
            return None
        return Document(id=row["doc_id"], data=row["data"])

    async def set_document(
        self,
        collection_path: str,
        doc_id: str,
        data: dict[str, Any],
        merge: bool = False
    ) -> None:
        conflict_update = (
            "documents.data || EXCLUDED.data" if merge else "EXCLUDED.data"
        )
        query = sql.SQL(
            """
            INSERT INTO documents (collection_path, doc_id, data)
            VALUES (%s, %s, %s)
            ON CONFLICT (collection_path, doc_id)
            DO UPDATE SET data = {conflict_update}, updated_at = CURRENT_TIMESTAMP
            """
        ).format(conflict_update=sql.SQL(conflict_update))

        try:
            async with self.database.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, (collection_path, doc_id, Jsonb(data)))
                    await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(
                e, operation="set_document", context={"collection": collection_path, "doc_id": doc_id}
            ) from e

    async def update_document(self, collection_path: str, doc_id: str, data: dict[str, Any]) -> None:
        try:
            async with self.database.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        UPDATE documents
                        SET data = data || %s,
                            updated_at = CURRENT_TIMESTAMP
                        WHERE collection_path = %s AND doc_id = %s
                        """,
                        (Jsonb(data), collection_path, doc_id)
                    )
                    updated = cur.rowcount
                    await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(
                e, operation="update_document", context={"collection": collection_path, "doc_id": doc_id}
            ) from e

        if updated == 0:
            raise RecordNotFoundError(
                f"Document {collection_path}/{doc_id} does not exist",
                collection=collection_path,
                record_id=doc_id,
                operation="update_document"
            )

    async def query_collection(
        self,
        collection_path: str,
        order_by: str,
        direction: str = "desc",
        limit: Optional[int] = None
    ) -> list[Document]:
        order = sql.SQL(_DIRECTIONS[_normalize_direction(direction)])
        query = sql.SQL(
            """
            SELECT doc_id, data
            FROM documents
            WHERE collection_path = %s
            ORDER BY data -> %s::text {order} NULLS LAST, created_at {order}
            """
        ).format(order=order)
        params: list[Any] = [collection_path, order_by]
        if limit is not None:
            query = query + sql.SQL(" LIMIT %s")
            params.append(limit)

        try:
            async with self.database.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    rows = await cur.fetchall()
        except psycopg.Error as e:
            raise wrap_external_exception(
                e, operation="query_collection", context={"collection": collection_path}
            ) from e

        return [Document(id=row["doc_id"], data=row["data"]) for row in rows]

    async def add_document(self, collection_path: str, data: dict[str, Any]) -> str:
        doc_id = uuid4().hex
        try:
            async with self.database.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO documents (collection_path, doc_id, data)
                        VALUES (%s, %s, %s)
                        """,
                        (collection_path, doc_id, Jsonb(data))
                    )
                    await conn.commit()
        except psycopg.Error as e:
            raise wrap_external_exception(
                e, operation="add_document", context={"collection": collection_path}
            ) from e
        return doc_id


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store. Nothing is persisted."""

    def __init__(self):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        logger.debug("InMemoryDocumentStore initialized")

    async def get_document(self, collection_path: str, doc_id: str) -> Optional[Document]:
        data = self._collections.get(collection_path, {}).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, data=copy.deepcopy(data))

    async def set_document(
        self,
        collection_path: str,
        doc_id: str,
        data: dict[str, Any],
        merge: bool = False
    ) -> None:
        collection = self._collections.setdefault(collection_path, {})
        if merge and doc_id in collection:
            collection[doc_id].update(copy.deepcopy(data))
        else:
            collection[doc_id] = copy.deepcopy(data)

    async def update_document(self, collection_path: str, doc_id: str, data: dict[str, Any]) -> None:
        collection = self._collections.get(collection_path, {})
        if doc_id not in collection:
            raise RecordNotFoundError(
                f"Document {collection_path}/{doc_id} does not exist",
                collection=collection_path,
                record_id=doc_id,
                operation="update_document"
            )
        collection[doc_id].update(copy.deepcopy(data))

    async def query_collection(
        self,
        collection_path: str,
        order_by: str,
        direction: str = "desc",
        limit: Optional[int] = None
    ) -> list[Document]:
        reverse = _normalize_direction(direction) == "desc"
        items = list(self._collections.get(collection_path, {}).items())

        present = [(doc_id, data) for doc_id, data in items if data.get(order_by) is not None]
        missing = [(doc_id, data) for doc_id, data in items if data.get(order_by) is None]
        present.sort(key=lambda item: item[1][order_by], reverse=reverse)

        documents = [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in present + missing
        ]
        return documents[:limit] if limit is not None else documents

    async def add_document(self, collection_path: str, data: dict[str, Any]) -> str:
        doc_id = uuid4().hex
        self._collections.setdefault(collection_path, {})[doc_id] = copy.deepcopy(data)
        return doc_id
