"""Domain entities: Project, Item and Donation."""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone
from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_serializer

ProjectStatus = Literal["active", "hidden", "deleted"]
ItemStatus = Literal["active", "hidden", "completed", "deleted"]
DonationStatus = Literal["pending", "confirmed", "deleted"]
ThemeColor = Literal["purple", "pink", "blue", "green"]

PROJECT_ID_LENGTH = 8
_PROJECT_ID_ALPHABET = string.ascii_letters + string.digits + "_-"

_sentinel = object()


def generate_project_id(length: int = PROJECT_ID_LENGTH) -> str:
    """Short URL-safe id used in share links (/p/<project_id>)."""
    return "".join(secrets.choice(_PROJECT_ID_ALPHABET) for _ in range(length))


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _Timestamped(BaseModel):
    created_at: datetime = Field(default_factory=_now)
    updated_at: Optional[datetime] = None

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat()

    @field_serializer("updated_at")
    def serialize_updated_at(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None

    def touch(self) -> None:
        self.updated_at = _now()


class Project(_Timestamped):
    """A funding page owned by one user.

    `account_number` holds the stored form: ciphertext from the account
    cipher, or legacy plaintext. It is never decrypted on the entity.
    """

    project_id: str = Field(default_factory=generate_project_id)
    user_id: str
    title: str = Field(..., min_length=1, max_length=100)
    subtitle: str = Field(default="", max_length=200)
    account_bank: str = Field(..., min_length=1)
    account_number: str = Field(..., min_length=1)
    account_holder: str = Field(..., min_length=1)
    toss_qr_link: Optional[str] = None
    donation_amounts: Optional[str] = None
    theme_color: ThemeColor = "purple"
    status: ProjectStatus = "active"

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and user_id == self.user_id

    def is_visible_to(self, viewer_id: Optional[str]) -> bool:
        """Deleted projects are gone for everyone; hidden ones stay visible to the owner."""
        if self.status == "deleted":
            return False
        if self.status == "hidden":
            return self.is_owned_by(viewer_id)
        return True

    def update_details(
        self,
        title: Optional[str] = None,
        subtitle: Optional[str] = None,
        account_bank: Optional[str] = None,
        account_number: Optional[str] = None,
        account_holder: Optional[str] = None,
        toss_qr_link: object = _sentinel,
        donation_amounts: object = _sentinel,
        theme_color: Optional[ThemeColor] = None,
    ) -> None:
        """Apply provided fields. Empty strings leave required fields untouched."""
        if title:
            self.title = title
        if subtitle is not None:
            self.subtitle = subtitle
        if account_bank:
            self.account_bank = account_bank
        if account_number:
            self.account_number = account_number
        if account_holder:
            self.account_holder = account_holder
        if toss_qr_link is not _sentinel:
            self.toss_qr_link = toss_qr_link or None
        if donation_amounts is not _sentinel:
            self.donation_amounts = donation_amounts or None
        if theme_color:
            self.theme_color = theme_color
        self.touch()

    def change_status(self, status: ProjectStatus) -> None:
        if self.status == "deleted":
            raise ValueError("Project has been deleted.")
        self.status = status
        self.touch()

    def hide(self) -> None:
        self.change_status("hidden")

    def show(self) -> None:
        self.change_status("active")

    def soft_delete(self) -> None:
        self.status = "deleted"
        self.touch()


class Item(_Timestamped):
    """A gift on a project's wishlist."""

    item_id: str = Field(default_factory=lambda: str(uuid4()))
    project_id: str
    title: str = Field(..., min_length=1, max_length=100)
    url: str = ""
    image: Optional[str] = None
    price: int = Field(..., gt=0)
    status: ItemStatus = "active"
    order: int = Field(default=0, ge=0)

    @property
    def is_public(self) -> bool:
        return self.status in ("active", "completed")

    def update_details(
        self,
        title: Optional[str] = None,
        url: Optional[str] = None,
        image: object = _sentinel,
        price: Optional[int] = None,
    ) -> None:
        if self.status == "deleted":
            raise ValueError("Cannot update a deleted item.")
        if title:
            self.title = title
        if url is not None:
            self.url = url
        if image is not _sentinel:
            self.image = image or None
        if price is not None:
            if price <= 0:
                raise ValueError("Item price must be positive.")
            self.price = price
        self.touch()

    def change_status(self, status: ItemStatus) -> None:
        if self.status == "deleted":
            raise ValueError("Item has been deleted.")
        self.status = status
        self.touch()

    def soft_delete(self) -> None:
        self.status = "deleted"
        self.touch()


class Donation(_Timestamped):
    """A pledged gift toward one item, settled outside the system."""

    donation_id: str = Field(default_factory=lambda: str(uuid4()))
    item_id: str
    project_id: str
    donor_name: str = Field(..., min_length=1, max_length=50)
    message: str = Field(default="", max_length=500)
    amount: int = Field(..., gt=0)
    status: DonationStatus = "pending"

    @property
    def is_counted(self) -> bool:
        """Pending and confirmed donations both count toward an item's total."""
        return self.status in ("pending", "confirmed")

    def change_status(self, status: DonationStatus) -> None:
        if self.status == "deleted":
            raise ValueError("Donation has been deleted.")
        self.status = status
        self.touch()

    def confirm(self) -> None:
        self.change_status("confirmed")

    def revert_to_pending(self) -> None:
        self.change_status("pending")

    def soft_delete(self) -> None:
        self.status = "deleted"
        self.touch()
