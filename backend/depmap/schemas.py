from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class SessionRequest(BaseModel):
    """Any request that works on an uploaded dependency file"""
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")


class SearchRequest(SessionRequest):
    search_term: str = Field(alias="searchTerm")
    max_depth: Optional[int] = Field(default=None, alias="maxDepth", ge=0, le=10)


class WavesRequest(SessionRequest):
    include_mermaid: bool = Field(default=False, alias="includeMermaid")
