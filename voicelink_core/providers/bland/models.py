"""
Bland API shapes (https://docs.bland.ai/api-v1/).

Bland's agent concept is the pathway; a pathway id is the agent's
external id everywhere else in this package.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BlandModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class BlandPathway(BlandModel):
    id: str = Field(validation_alias=AliasChoices("id", "pathway_id"))
    name: Optional[str] = None
    description: Optional[str] = None
    nodes: Optional[List[Any]] = None
    edges: Optional[List[Any]] = None
    created_at: Optional[str] = None


class BlandTranscriptEntry(BlandModel):
    id: Optional[int] = None
    created_at: Optional[str] = None
    text: Optional[str] = None
    user: Optional[str] = None  # assistant | user


class BlandCall(BlandModel):
    call_id: str = Field(validation_alias=AliasChoices("call_id", "c_id", "id"))
    pathway_id: Optional[str] = None
    to: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    status: Optional[str] = None
    queue_status: Optional[str] = None
    completed: Optional[bool] = None
    inbound: Optional[bool] = None
    call_length: Optional[float] = None  # minutes
    price: Optional[float] = None  # dollars
    answered_by: Optional[str] = None
    summary: Optional[str] = None
    recording_url: Optional[str] = None
    concatenated_transcript: Optional[str] = None
    transcripts: Optional[List[BlandTranscriptEntry]] = None
    variables: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    created_at: Optional[str] = None
    started_at: Optional[str] = None
    end_at: Optional[str] = None


class BlandVoice(BlandModel):
    voice_id: str = Field(validation_alias=AliasChoices("voice_id", "id"))
    name: Optional[str] = None
    is_custom: Optional[bool] = None
    description: Optional[str] = None
    preview_url: Optional[str] = None


class BlandInboundNumber(BlandModel):
    phone_number: str
    pathway_id: Optional[str] = None
    prompt: Optional[str] = None
    voice: Optional[str] = None
    webhook: Optional[str] = None
    created_at: Optional[str] = None


class BlandPurchasedNumber(BlandModel):
    phone_number: Optional[str] = None
