"""
Output models for action results.

Results are serialized into the response body by the dispatcher; these models
fix the shape of the non-record results.
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, Field


class TokenOutput(BaseModel):
    """Result of a successful LOGIN."""

    token: Annotated[str, Field(description='Signed bearer token')]


class SuccessOutput(BaseModel):
    """Result of a write action that carries no payload."""

    success: bool = True


class PutResult(BaseModel):
    """Outcome of one write in a batch upsert."""

    context: str
    id: str
    success: bool
    error: Optional[str] = None


class SeedOutput(BaseModel):
    """Result of the INIT action."""

    success: Annotated[bool, Field(description='True when every seed write landed')]
    results: Annotated[List[PutResult], Field(default_factory=list)]
