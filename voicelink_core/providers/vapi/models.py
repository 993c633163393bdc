"""
Vapi API shapes (https://docs.vapi.ai/api-reference/).

Field names follow Vapi's camelCase wire format.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class VapiModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class VapiVoice(VapiModel):
    provider: Optional[str] = None
    voiceId: Optional[str] = None
    speed: Optional[float] = None
    stability: Optional[float] = None


class VapiLanguageModel(VapiModel):
    provider: Optional[str] = None
    model: Optional[str] = None
    systemPrompt: Optional[str] = None
    temperature: Optional[float] = None


class VapiTranscriber(VapiModel):
    provider: Optional[str] = None
    model: Optional[str] = None
    language: Optional[str] = None


class VapiAssistant(VapiModel):
    id: str
    orgId: Optional[str] = None
    name: Optional[str] = None
    voice: Optional[VapiVoice] = None
    model: Optional[VapiLanguageModel] = None
    transcriber: Optional[VapiTranscriber] = None
    firstMessage: Optional[str] = None
    firstMessageMode: Optional[str] = None
    serverUrl: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class VapiParty(VapiModel):
    number: Optional[str] = None
    name: Optional[str] = None


class VapiAnalysis(VapiModel):
    summary: Optional[str] = None
    successEvaluation: Optional[Any] = None
    structuredData: Optional[Dict[str, Any]] = None


class VapiCostBreakdown(VapiModel):
    transport: Optional[float] = None
    stt: Optional[float] = None
    llm: Optional[float] = None
    tts: Optional[float] = None
    vapi: Optional[float] = None
    total: Optional[float] = None


class VapiCall(VapiModel):
    id: str
    orgId: Optional[str] = None
    assistantId: Optional[str] = None
    phoneNumberId: Optional[str] = None
    type: Optional[str] = None  # inboundPhoneCall | outboundPhoneCall | webCall
    status: Optional[str] = None  # queued | ringing | in-progress | forwarding | ended
    endedReason: Optional[str] = None
    startedAt: Optional[str] = None
    endedAt: Optional[str] = None
    transcript: Optional[str] = None
    messages: Optional[List[Dict[str, Any]]] = None
    recordingUrl: Optional[str] = None
    stereoRecordingUrl: Optional[str] = None
    summary: Optional[str] = None
    cost: Optional[float] = None  # dollars
    costBreakdown: Optional[VapiCostBreakdown] = None
    customer: Optional[VapiParty] = None
    phoneNumber: Optional[VapiParty] = None
    analysis: Optional[VapiAnalysis] = None
    metadata: Optional[Dict[str, Any]] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class VapiPhoneNumber(VapiModel):
    id: str
    orgId: Optional[str] = None
    number: Optional[str] = None
    name: Optional[str] = None
    provider: Optional[str] = None  # twilio | vonage | vapi
    assistantId: Optional[str] = None
    squadId: Optional[str] = None
    serverUrl: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
