"""Shared base for request/response schemas.

Fields are snake_case in Python and camelCase on the wire, which is what the
browser client expects. populate_by_name lets tests and internal callers use
either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
