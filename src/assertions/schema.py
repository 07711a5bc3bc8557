"""Request and response models for assertion generation and retrieval.

Wire names are camelCase (``contestName``); Python code uses snake_case.
Deep validation against the electoral database happens upstream.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateAssertionsRequest(_ApiModel):
    """Request to generate and store assertions for one contest."""

    contest_name: str
    total_auditable_ballots: int = Field(description="Universe size for diluted margins")
    time_limit_seconds: float = Field(default=5.0, gt=0)
    candidates: list[str] = Field(description="Candidate names, in solver index order")


class GetAssertionsRequest(_ApiModel):
    """Request to export the stored assertions for one contest."""

    contest_name: str
    candidates: list[str]
    risk_limit: Decimal = Field(ge=0)


class GenerateAssertionsResponse(_ApiModel):
    """Successful generation: the contest and its winner."""

    contest_name: str
    winner: str
