from __future__ import annotations

from sqlalchemy import JSON, Column, Index, Integer, String, Text

from ..db.session import Base


class Document(Base):
    """A schemaless record inside a named collection.

    ``data`` holds the caller's key/value payload. ``doc_id`` is assigned by
    the store and is what callers see as the record's ``id``; ``pk`` only
    preserves insertion order.
    """

    __tablename__ = "documents"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    doc_id = Column(String(32), nullable=False, unique=True, index=True)
    collection = Column(String(64), nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    __table_args__ = (Index("ix_documents_collection_doc", "collection", "doc_id"),)

    def as_record(self) -> dict:
        record = dict(self.data or {})
        record["id"] = self.doc_id
        return record
