"""
Retell API shapes.

Mirrors https://docs.retellai.com/api-references/ closely enough to read the
fields this layer uses. Unknown fields are kept (``extra="allow"``) so a
model can be dumped back without losing vendor data.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RetellModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class RetellResponseEngine(RetellModel):
    type: Optional[str] = None
    llm_id: Optional[str] = None
    version: Optional[int] = None


class RetellAgent(RetellModel):
    agent_id: str
    agent_name: Optional[str] = None
    voice_id: Optional[str] = None
    llm_websocket_url: Optional[str] = None
    webhook_url: Optional[str] = None
    webhook_events: Optional[List[str]] = None
    language: Optional[str] = None
    ambient_sound: Optional[str] = None
    responsiveness: Optional[float] = None
    interruption_sensitivity: Optional[float] = None
    response_engine: Optional[RetellResponseEngine] = None
    llm_id: Optional[str] = None
    is_published: Optional[bool] = None
    version: Optional[int] = None
    created_at: Optional[Any] = None
    last_modification_timestamp: Optional[int] = None

    @property
    def effective_llm_id(self) -> Optional[str]:
        """LLM backing this agent, from the response engine or the legacy field."""
        if self.response_engine and self.response_engine.llm_id:
            return self.response_engine.llm_id
        return self.llm_id


class RetellLLM(RetellModel):
    llm_id: str
    model: Optional[str] = None
    general_prompt: Optional[str] = None
    begin_message: Optional[str] = None
    inbound_dynamic_variables_webhook_url: Optional[str] = None
    general_tools: Optional[List[Any]] = None
    states: Optional[List[Any]] = None


class RetellCallAnalysis(RetellModel):
    call_summary: Optional[str] = None
    user_sentiment: Optional[str] = None
    agent_sentiment: Optional[str] = None
    custom_analysis_data: Optional[Dict[str, Any]] = None


class RetellProductCost(RetellModel):
    product: Optional[str] = None
    cost: Optional[float] = None
    unit_price: Optional[float] = None


class RetellCallCost(RetellModel):
    combined_cost: Optional[float] = None  # cents
    product_costs: Optional[List[RetellProductCost]] = None
    total_duration_seconds: Optional[float] = None


class RetellCall(RetellModel):
    call_id: str
    agent_id: Optional[str] = None
    call_type: Optional[str] = None  # web_call | phone_call
    call_status: Optional[str] = None  # registered | ongoing | ended | error
    start_timestamp: Optional[int] = None  # epoch millis
    end_timestamp: Optional[int] = None
    transcript: Optional[str] = None
    transcript_object: Optional[List[Dict[str, Any]]] = None
    recording_url: Optional[str] = None
    public_log_url: Optional[str] = None
    from_number: Optional[str] = None
    to_number: Optional[str] = None
    direction: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    call_analysis: Optional[RetellCallAnalysis] = None
    call_cost: Optional[RetellCallCost] = None
    disconnection_reason: Optional[str] = None


class RetellKnowledgeBaseSource(RetellModel):
    source_id: str
    source_type: Optional[str] = None  # file | url | text
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    content: Optional[str] = None
    status: Optional[str] = None


class RetellKnowledgeBase(RetellModel):
    knowledge_base_id: str
    knowledge_base_name: Optional[str] = None
    status: Optional[str] = None  # in_progress | complete | error
    knowledge_base_sources: List[RetellKnowledgeBaseSource] = Field(default_factory=list)
    created_at: Optional[int] = None
    last_refreshed_at: Optional[int] = None


class KnowledgeBaseText(RetellModel):
    title: str
    text: str


class KnowledgeBaseURL(RetellModel):
    url: str
    enable_auto_refresh: Optional[bool] = None
