"""
Shared base for request/response models.

The browser client speaks camelCase JSON; Python code uses snake_case
field names and the aliases take care of the wire format.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
