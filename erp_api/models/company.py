"""
models/company.py
-----------------
Company (tenant) ORM model.

Each company is an isolated partition of data. Users, inventory items and
projects point at it by company_id, and every tenant-scoped query must
include that column in its WHERE clause.

Name uniqueness is checked at registration time only; the index on name is
not unique.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from erp_api.db.base import Base, TimestampMixin


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name}>"
