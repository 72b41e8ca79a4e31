"""
Pydantic request / response schemas for the API.
"""

from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from yelp_insights.models.conversation import Conversation

NonEmptyStr = Annotated[str, Field(min_length=1)]


# ── Business search ──────────────────────────────────────
class BusinessSearchRequest(BaseModel):
    business_name: NonEmptyStr
    city: NonEmptyStr
    state: NonEmptyStr
    phone: Optional[str] = None
    address: Optional[str] = None


class BusinessSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    rating: Optional[float] = None
    review_count: Optional[int] = None
    location: Optional[Dict[str, Any]] = None
    phone: Optional[str] = None
    display_phone: Optional[str] = None
    image_url: Optional[str] = None
    coordinates: Optional[Dict[str, Any]] = None


class BusinessSearchResponse(BaseModel):
    success: bool = True
    source: str
    business: Optional[BusinessSummary] = None
    businesses: Optional[List[BusinessSummary]] = None


# ── Conversation ─────────────────────────────────────────
class StartConversationRequest(BaseModel):
    user_id: NonEmptyStr
    business_id: NonEmptyStr
    business_name: NonEmptyStr


class StartConversationResponse(BaseModel):
    success: bool = True
    conversation_id: str
    message: str = "Conversation started"


class TextMessageRequest(BaseModel):
    user_id: NonEmptyStr
    conversation_id: NonEmptyStr
    message: NonEmptyStr


class TurnResponse(BaseModel):
    success: bool = True
    conversation_id: str
    response: str
    source: str
    audio: Optional[str] = None  # base64 MP3, None when speech synthesis failed
    transcription: Optional[str] = None


class ConversationListItem(BaseModel):
    id: str
    business_name: str
    timestamp: str
    last_updated: str
    message_count: int


class HistoryResponse(BaseModel):
    success: bool = True
    conversations: List[ConversationListItem]


class ConversationResponse(BaseModel):
    success: bool = True
    conversation: Conversation


class StatusResponse(BaseModel):
    success: bool = True
    message: str


# ── Reports ──────────────────────────────────────────────
class ConversationRef(BaseModel):
    user_id: NonEmptyStr
    conversation_id: NonEmptyStr


class PriorityItem(BaseModel):
    priority: Literal["high", "medium", "low"] = "medium"
    title: str
    action: str = ""


class ShareableReportRequest(ConversationRef):
    priorities: List[PriorityItem] = []
    additional_notes: str = ""


class ActionItemsRequest(BaseModel):
    priorities: List[PriorityItem] = Field(min_length=1)


class PrioritiesResponse(BaseModel):
    success: bool = True
    priorities: List[PriorityItem]
    generated_at: str


class ReportMetadata(BaseModel):
    business_name: str
    generated_at: str
    conversation_length: int
    priority_count: int
    has_notes: bool
    has_charts: bool


class ReportResponse(BaseModel):
    success: bool = True
    html: str
    metadata: ReportMetadata


class SummaryResponse(BaseModel):
    success: bool = True
    summary: str
    conversation_length: int
    generated_at: str


# ── Memory ───────────────────────────────────────────────
class InsightRequest(BaseModel):
    user_id: NonEmptyStr
    topic: NonEmptyStr
    on_date: Optional[date] = None


# ── Analysis ─────────────────────────────────────────────
class TimePeriodsRequest(BaseModel):
    business_id: NonEmptyStr
    topic: NonEmptyStr
    timeframe1: NonEmptyStr
    timeframe2: NonEmptyStr


class TopicRequest(BaseModel):
    business_id: NonEmptyStr
    topic: NonEmptyStr


class PatternsRequest(BaseModel):
    business_id: NonEmptyStr
    queries: List[str] = Field(min_length=1, max_length=10)


class CompetitorRequest(BaseModel):
    business_id: NonEmptyStr
    radius_meters: float = Field(default=8046.72, gt=0)


class CompetitionRequest(CompetitorRequest):
    query: NonEmptyStr


class BusinessRef(BaseModel):
    business_id: NonEmptyStr


class CompareBusinessesRequest(BaseModel):
    business_ids: List[str] = Field(min_length=2, max_length=5)
    query: NonEmptyStr
