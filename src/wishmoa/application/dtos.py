"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..domain.entities import DonationStatus, ItemStatus, ProjectStatus, ThemeColor
from ..payments.donation_amounts import AmountSelection


class _CreatedAtMixin:
    @field_serializer("created_at", check_fields=False)
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat()


class CreateProjectDTO(BaseModel):
    """DTO for creating a project."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Minji's birthday",
                "account_bank": "국민은행",
                "account_number": "110-234-567890",
                "account_holder": "Kim Minji",
            }
        }
    )

    title: str = Field(..., max_length=100)
    subtitle: Optional[str] = Field(None, max_length=200)
    account_bank: str
    account_number: str
    account_holder: str
    toss_qr_link: Optional[str] = None
    theme_color: Optional[ThemeColor] = None


class UpdateProjectDTO(BaseModel):
    """DTO for updating a project; unset fields are left alone."""

    title: Optional[str] = Field(None, max_length=100)
    subtitle: Optional[str] = Field(None, max_length=200)
    account_bank: Optional[str] = None
    account_number: Optional[str] = None
    account_holder: Optional[str] = None
    toss_qr_link: Optional[str] = None
    donation_amounts: Optional[List[int]] = None
    theme_color: Optional[ThemeColor] = None
    status: Optional[ProjectStatus] = None


class ProjectSummaryDTO(_CreatedAtMixin, BaseModel):
    """Owner dashboard row."""

    project_id: str
    title: str
    subtitle: str
    status: ProjectStatus
    theme_color: ThemeColor
    item_count: int
    created_at: datetime


class DonationResponseDTO(_CreatedAtMixin, BaseModel):
    donation_id: str
    item_id: str
    donor_name: str
    message: str
    amount: int
    status: DonationStatus
    created_at: datetime


class ItemResponseDTO(BaseModel):
    item_id: str
    title: str
    url: str
    image: Optional[str]
    price: int
    status: ItemStatus
    order: int
    total_donation: int = 0
    donations: List[DonationResponseDTO] = Field(default_factory=list)


class ProjectResponseDTO(_CreatedAtMixin, BaseModel):
    """Public project page; the account number is decrypted for donors."""

    project_id: str
    user_id: str
    title: str
    subtitle: str
    account_bank: str
    account_number: str
    account_holder: str
    toss_qr_link: Optional[str]
    donation_amounts: List[int]
    theme_color: ThemeColor
    status: ProjectStatus
    is_owner: bool
    items: List[ItemResponseDTO]
    created_at: datetime


class CreateItemDTO(BaseModel):
    title: str = Field(..., max_length=100)
    url: str = ""
    image: Optional[str] = None
    price: int = Field(..., gt=0)


class UpdateItemDTO(BaseModel):
    title: Optional[str] = Field(None, max_length=100)
    url: Optional[str] = None
    image: Optional[str] = None
    price: Optional[int] = Field(None, gt=0)
    status: Optional[ItemStatus] = None


class CreateDonationDTO(BaseModel):
    """DTO for recording a donation before the donor transfers the money."""

    item_id: str
    donor_name: str = Field(..., max_length=50)
    message: str = Field(default="", max_length=500)
    selection: AmountSelection
    custom_amount: Optional[int] = None


class DonationListDTO(BaseModel):
    donations: List[DonationResponseDTO]
    confirmed_total: int


class TransferOptionsDTO(BaseModel):
    """What the donor needs to pay: copyable account line and optional Toss link."""

    amount: int
    account_text: str
    account_number: str
    toss_link: Optional[str]


DonationFilter = Literal["all", "pending", "confirmed"]
