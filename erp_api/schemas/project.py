"""
schemas/project.py
------------------
Pydantic models for projects.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import Field, StringConstraints

from erp_api.schemas.common import CamelModel

ProjectName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


class ProjectWrite(CamelModel):
    """Body for both create and full update."""
    name: ProjectName
    description: Optional[str] = Field(default=None, max_length=2000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ProjectRead(CamelModel):
    id: int
    name: str
    description: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime
