# hoozin/models/kv_entry.py
from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from hoozin.db.base import Base


class KeyValueEntry(Base):
    """
    A single persisted string value, scoped to a logical namespace.

    The response cache and the user settings share this table but never
    each other's keys: every query filters on `namespace`.
    """

    __tablename__ = "kv_entries"

    id = Column(Integer, primary_key=True, index=True)

    namespace = Column(String(32), nullable=False, index=True)
    key = Column(String(255), nullable=False)
    value = Column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "namespace",
            "key",
            name="uq_kv_entries_namespace_key",
        ),
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry namespace={self.namespace} key={self.key}>"
