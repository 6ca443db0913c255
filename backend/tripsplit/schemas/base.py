"""
Shared base for API schemas. JSON uses camelCase field names.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base schema accepting both camelCase and snake_case input."""
    
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
