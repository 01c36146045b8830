"""
============================================================================
Customer Service v1.0.0
Auth Schemas - Login Request & Response
============================================================================
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Account name")
    password: str = Field(..., min_length=1, description="Account password")


class LoginResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str = Field(..., description="Signed JWT bearer token")
    token_type: str = Field("Bearer", description="Authorization scheme")
