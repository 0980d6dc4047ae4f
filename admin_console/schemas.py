"""Wire models for the backend REST contract.

The backend speaks camelCase JSON and wraps every payload as
``{success, data, message?}``. Models accept both alias and field names.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from admin_console.errors import APIError

T = TypeVar("T")


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ════════════════════════════════════════════════════════════════════════════
# Envelope and paging
# ════════════════════════════════════════════════════════════════════════════
class ApiResponse(WireModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None

    def unwrap(self) -> T:
        """Return ``data`` or raise APIError when the backend reported failure."""
        if not self.success:
            raise APIError(self.message or "Request failed")
        return self.data


class Page(WireModel, Generic[T]):
    content: List[T] = []
    page: int = 0
    size: int = 10
    total_elements: int = 0
    total_pages: int = 0
    first: Optional[bool] = None
    last: Optional[bool] = None

    @model_validator(mode="after")
    def _derive_edges(self):
        if self.first is None:
            self.first = self.page == 0
        if self.last is None:
            self.last = self.page >= self.total_pages - 1
        return self


# ════════════════════════════════════════════════════════════════════════════
# Auth
# ════════════════════════════════════════════════════════════════════════════
class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(WireModel):
    id: int
    email: str
    name: str
    avatar: Optional[str] = None
    role: UserRole
    taste_score: float = 0
    region: Optional[str] = None

    @property
    def initial(self) -> str:
        return self.name[:1].upper() if self.name else "A"


class LoginIn(WireModel):
    email: str
    password: str


class LoginResult(WireModel):
    token: str


class AdminStats(WireModel):
    total_users: int = 0
    total_reviews: int = 0
    total_restaurants: int = 0
    pending_reports: int = 0
    pending_chat_reports: int = 0
    pending_receipt_reviews: int = 0
    pending_restaurants: int = 0
    failed_refunds: int = 0


# ════════════════════════════════════════════════════════════════════════════
# Reports
# ════════════════════════════════════════════════════════════════════════════
class ReportStatus(str, Enum):
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class ReportReason(str, Enum):
    SPAM = "SPAM"
    INAPPROPRIATE = "INAPPROPRIATE"
    FAKE_REVIEW = "FAKE_REVIEW"
    NO_RECEIPT = "NO_RECEIPT"
    HARASSMENT = "HARASSMENT"
    COPYRIGHT = "COPYRIGHT"
    OTHER = "OTHER"


class ChatReportReason(str, Enum):
    HARASSMENT = "HARASSMENT"
    SPAM = "SPAM"
    SEXUAL_HARASSMENT = "SEXUAL_HARASSMENT"
    FRAUD = "FRAUD"
    INAPPROPRIATE = "INAPPROPRIATE"
    OTHER = "OTHER"


class ProcessAction(str, Enum):
    RESOLVE = "RESOLVE"
    REJECT = "REJECT"


class Person(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class Report(WireModel):
    id: int
    review_id: int
    review_content: str = ""
    reviewer_name: Optional[str] = None
    reviewer_email: Optional[str] = None
    restaurant_name: Optional[str] = None
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    reason: Union[ReportReason, str] = Field(union_mode="left_to_right")
    description: Optional[str] = None
    status: ReportStatus
    admin_note: Optional[str] = None
    processed_by_name: Optional[str] = None
    created_at: datetime
    processed_at: Optional[datetime] = None

    @property
    def reviewer(self) -> Person:
        return Person(name=self.reviewer_name, email=self.reviewer_email)

    @property
    def reporter(self) -> Person:
        return Person(name=self.reporter_name, email=self.reporter_email)

    @property
    def is_pending(self) -> bool:
        return self.status == ReportStatus.PENDING


class ChatReport(WireModel):
    id: int
    reporter_id: Optional[int] = None
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    reported_user_id: Optional[int] = None
    reported_user_name: Optional[str] = None
    reported_user_email: Optional[str] = None
    chat_room_id: Optional[int] = None
    chat_room_uuid: Optional[str] = None
    message_id: Optional[int] = None
    message_content: Optional[str] = None
    reason: Union[ChatReportReason, str] = Field(union_mode="left_to_right")
    reason_description: Optional[str] = None
    description: Optional[str] = None
    status: ReportStatus
    status_description: Optional[str] = None
    admin_note: Optional[str] = None
    processed_by_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def reporter(self) -> Person:
        return Person(name=self.reporter_name, email=self.reporter_email)

    @property
    def reported_user(self) -> Person:
        return Person(name=self.reported_user_name, email=self.reported_user_email)

    @property
    def is_pending(self) -> bool:
        return self.status == ReportStatus.PENDING


class ProcessReportIn(WireModel):
    action: ProcessAction
    admin_note: Optional[str] = None
    delete_review: Optional[bool] = None


class ProcessChatReportIn(WireModel):
    action: ProcessAction
    admin_note: Optional[str] = None


# ════════════════════════════════════════════════════════════════════════════
# Approval queues
# ════════════════════════════════════════════════════════════════════════════
class PendingRestaurant(WireModel):
    id: int
    name: str
    category: Optional[str] = None
    category_display: Optional[str] = None
    address: Optional[str] = None
    region: Optional[str] = None
    district: Optional[str] = None
    neighborhood: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    signboard_image_url: Optional[str] = None
    registered_by_id: Optional[int] = None
    registered_by_name: Optional[str] = None
    created_at: datetime

    @property
    def area(self) -> str:
        return " ".join(p for p in (self.region, self.district, self.neighborhood) if p)


class RejectRestaurantIn(WireModel):
    reason: str


class ReceiptReview(WireModel):
    id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    restaurant_id: Optional[int] = None
    restaurant_name: Optional[str] = None
    content: str = ""
    receipt_image_url: Optional[str] = None
    verification_status: Optional[str] = None
    verification_score: Optional[float] = None
    ocr_text: Optional[str] = None
    created_at: datetime


# ════════════════════════════════════════════════════════════════════════════
# Gatherings and refunds
# ════════════════════════════════════════════════════════════════════════════
class GatheringStatus(str, Enum):
    RECRUITING = "RECRUITING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class GatheringRestaurant(WireModel):
    id: int
    name: str
    address: Optional[str] = None
    category: Optional[str] = None


class GatheringCreator(WireModel):
    id: int
    name: str
    email: Optional[str] = None
    avatar: Optional[str] = None


class Gathering(WireModel):
    id: int
    uuid: str
    title: str
    description: Optional[str] = None
    status: Union[GatheringStatus, str] = Field(union_mode="left_to_right")
    status_display: Optional[str] = None
    refund_type: Optional[str] = None
    refund_type_display: Optional[str] = None
    target_time: datetime
    max_participants: int = 0
    current_participants: int = 0
    deposit_amount: int = 0
    chat_room_uuid: Optional[str] = None
    restaurant: Optional[GatheringRestaurant] = None
    creator: Optional[GatheringCreator] = None
    created_at: datetime

    @property
    def status_code(self) -> str:
        return getattr(self.status, "value", self.status)


class FailedRefund(WireModel):
    id: int
    gathering_id: Optional[int] = None
    gathering_uuid: Optional[str] = None
    gathering_title: Optional[str] = None
    restaurant_name: Optional[str] = None
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    deposit_amount: int = 0
    imp_uid: Optional[str] = None
    merchant_uid: Optional[str] = None
    refund_reason: Optional[str] = None
    created_at: datetime
    gathering_target_time: Optional[datetime] = None
