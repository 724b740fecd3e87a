"""
schemas/common.py
-----------------
Shared Pydantic base for request/response bodies.

The HTTP API speaks camelCase (companyId, adminEmail, ...). Fields are
declared in snake_case and aliased; snake_case input is accepted too.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
