"""
Input models for action data validation using Pydantic.

Only the fields an action cannot run without are declared. Order and item
payloads are free-form and are not modelled here.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Data of a LOGIN action."""

    model_config = ConfigDict(extra='ignore')

    userId: Annotated[str, Field(
        description='User id to log in as',
        examples=['admin']
    )] = ''

    password: Annotated[str, Field(
        description='Password hash as stored for the user',
        examples=['cac28395540089e505a68311833c2cb5a92f84f4']
    )] = ''


class RecordIdRequest(BaseModel):
    """Data of actions that address one record by id."""

    model_config = ConfigDict(extra='ignore')

    id: Annotated[str, Field(
        min_length=1,
        description='Record id within its context',
        examples=['V1StGXR8_Z5jdHi6B-myT']
    )]
