from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EvaluateRequest(CamelRequest):
    tenant_id: Optional[str] = None
    submission_id: str = Field(min_length=1)
    write_back: bool = True


class RecomputeRequest(CamelRequest):
    tenant_id: Optional[str] = None
    write_back: bool = True


class CategoryValidateRequest(CamelRequest):
    tenant_id: Optional[str] = None
    value: str = ""
