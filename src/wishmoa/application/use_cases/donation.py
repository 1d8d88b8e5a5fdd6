"""Donation use cases: pledging, owner settlement and payment options."""

from __future__ import annotations

import logging
from typing import List, Optional

from ...crypto.account_cipher import AccountCipher
from ...domain.entities import Donation, DonationStatus
from ...domain.errors import (
    DonationNotFoundError,
    InvalidAmountError,
    ItemNotFoundError,
    ProjectNotFoundError,
    RateLimitExceededError,
)
from ...domain.repositories import (
    DonationRepository,
    ItemRepository,
    ProjectRepository,
)
from ...infrastructure.rate_limit import (
    RATE_LIMITS,
    FixedWindowRateLimiter,
    RateLimitOptions,
)
from ...payments.toss_link import create_link_with_amount
from ..dtos import (
    CreateDonationDTO,
    DonationFilter,
    DonationListDTO,
    DonationResponseDTO,
    TransferOptionsDTO,
)
from .project import get_owned_project

logger = logging.getLogger(__name__)


class DonationService:
    """Service for donation-related operations."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        item_repository: ItemRepository,
        donation_repository: DonationRepository,
        cipher: AccountCipher,
        *,
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
        rate_limit: RateLimitOptions = RATE_LIMITS["general_api"],
    ):
        self.project_repository = project_repository
        self.item_repository = item_repository
        self.donation_repository = donation_repository
        self.cipher = cipher
        self.rate_limiter = rate_limiter
        self.rate_limit = rate_limit

    async def create_donation(
        self, dto: CreateDonationDTO, client_id: Optional[str] = None
    ) -> DonationResponseDTO:
        """Record a pending donation; the owner confirms it once money arrives."""
        if self.rate_limiter is not None and client_id is not None:
            result = self.rate_limiter.check(client_id, self.rate_limit)
            if not result.success:
                raise RateLimitExceededError(result.reset_at)

        donor_name = dto.donor_name.strip()
        if not donor_name:
            raise ValueError("Enter your name")
        amount = dto.selection.resolve(dto.custom_amount)

        item = await self.item_repository.get_by_id(dto.item_id)
        if item is None or item.status != "active":
            raise ItemNotFoundError(dto.item_id)
        project = await self.project_repository.get_by_id(item.project_id)
        if project is None or project.status != "active":
            raise ProjectNotFoundError(item.project_id)

        donation = Donation(
            item_id=item.item_id,
            project_id=project.project_id,
            donor_name=donor_name,
            message=dto.message.strip(),
            amount=amount,
        )
        created = await self.donation_repository.create(donation)
        logger.info(
            "Recorded donation %s for item %s", created.donation_id, item.item_id
        )
        return DonationResponseDTO(**created.model_dump())

    async def list_donations(
        self, project_id: str, user_id: str, status_filter: DonationFilter = "all"
    ) -> DonationListDTO:
        """Owner view; the total only counts confirmed donations."""
        await get_owned_project(self.project_repository, project_id, user_id)
        donations = await self.donation_repository.get_by_project(project_id)
        if status_filter == "all":
            shown = [d for d in donations if d.status != "deleted"]
        else:
            shown = [d for d in donations if d.status == status_filter]
        return DonationListDTO(
            donations=[DonationResponseDTO(**d.model_dump()) for d in shown],
            confirmed_total=sum(d.amount for d in shown if d.status == "confirmed"),
        )

    async def _get_owned_donation(self, donation_id: str, user_id: str) -> Donation:
        donation = await self.donation_repository.get_by_id(donation_id)
        if donation is None or donation.status == "deleted":
            raise DonationNotFoundError(donation_id)
        await get_owned_project(self.project_repository, donation.project_id, user_id)
        return donation

    async def change_status(
        self, donation_id: str, user_id: str, status: DonationStatus
    ) -> DonationResponseDTO:
        donation = await self._get_owned_donation(donation_id, user_id)
        if status == "deleted":
            donation.soft_delete()
        else:
            donation.change_status(status)
        updated = await self.donation_repository.update(donation)
        return DonationResponseDTO(**updated.model_dump())

    async def delete_donation(self, donation_id: str, user_id: str) -> None:
        donation = await self._get_owned_donation(donation_id, user_id)
        donation.soft_delete()
        await self.donation_repository.update(donation)

    async def transfer_options(
        self, project_id: str, amount: int, viewer_id: Optional[str] = None
    ) -> TransferOptionsDTO:
        """Account line to copy plus a one-tap Toss link when one can be built."""
        if amount <= 0:
            raise InvalidAmountError("Enter a valid gift amount")
        project = await self.project_repository.get_by_id(project_id)
        if project is None or not project.is_visible_to(viewer_id):
            raise ProjectNotFoundError(project_id)

        account_number = self.cipher.decrypt(project.account_number)
        toss_link = None
        if project.toss_qr_link:
            toss_link = create_link_with_amount(project.toss_qr_link, amount)
        return TransferOptionsDTO(
            amount=amount,
            account_text=f"{account_number} {project.account_bank} ({project.account_holder})",
            account_number=account_number,
            toss_link=toss_link,
        )
