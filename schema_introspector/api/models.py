"""
Pydantic models for the introspector API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from schema_introspector.config import IntrospectionConfig


class IntrospectionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pretty_print: StrictBool = Field(False, alias="prettyPrint")
    use_constant_ids: StrictBool = Field(True, alias="useConstantIds")
    quote_tokens: StrictBool = Field(True, alias="quoteTokens")
    sample_only: StrictBool = Field(True, alias="sampleOnly")

    def to_config(self) -> IntrospectionConfig:
        return IntrospectionConfig(
            pretty_print=self.pretty_print,
            use_constant_ids=self.use_constant_ids,
            quote_tokens=self.quote_tokens,
            sample_only=self.sample_only,
        )


class HealthResponse(BaseModel):
    status: str
