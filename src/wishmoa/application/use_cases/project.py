"""Project use cases: create, list, view, update and soft-delete."""

from __future__ import annotations

import logging
from typing import List, Optional

from ...crypto.account_cipher import AccountCipher
from ...domain.entities import Project
from ...domain.errors import PermissionDeniedError, ProjectNotFoundError
from ...domain.repositories import (
    DonationRepository,
    ItemRepository,
    ProjectRepository,
)
from ...payments.donation_amounts import (
    DEFAULT_DONATION_AMOUNTS,
    format_donation_amounts,
    parse_donation_amounts,
)
from ...payments.toss_link import is_valid_toss_link
from ..dtos import (
    CreateProjectDTO,
    DonationResponseDTO,
    ItemResponseDTO,
    ProjectResponseDTO,
    ProjectSummaryDTO,
    UpdateProjectDTO,
)

logger = logging.getLogger(__name__)


def _required(value: Optional[str], message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(message)
    return value


def _checked_toss_link(link: Optional[str]) -> Optional[str]:
    link = (link or "").strip()
    if not link:
        return None
    if not is_valid_toss_link(link):
        raise ValueError("Not a Toss transfer QR link")
    return link


async def get_owned_project(
    projects: ProjectRepository, project_id: str, user_id: str
) -> Project:
    """Load a non-deleted project and check that `user_id` owns it."""
    project = await projects.get_by_id(project_id)
    if project is None or project.status == "deleted":
        raise ProjectNotFoundError(project_id)
    if not project.is_owned_by(user_id):
        raise PermissionDeniedError("Only the project owner can do this")
    return project


class ProjectService:
    """Service for project-related operations."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        item_repository: ItemRepository,
        donation_repository: DonationRepository,
        cipher: AccountCipher,
        default_donation_amounts: tuple[int, ...] = DEFAULT_DONATION_AMOUNTS,
    ):
        self.project_repository = project_repository
        self.item_repository = item_repository
        self.donation_repository = donation_repository
        self.cipher = cipher
        self.default_donation_amounts = tuple(default_donation_amounts)

    async def create_project(
        self, user_id: str, dto: CreateProjectDTO
    ) -> ProjectResponseDTO:
        """Create a project; the account number is stored encrypted."""
        title = _required(dto.title, "Enter a funding title")
        bank = _required(dto.account_bank, "Select a bank")
        account_number = _required(dto.account_number, "Enter an account number")
        holder = _required(dto.account_holder, "Enter the account holder")

        project = Project(
            user_id=user_id,
            title=title,
            subtitle=(dto.subtitle or "").strip(),
            account_bank=bank,
            account_number=self.cipher.encrypt(account_number),
            account_holder=holder,
            toss_qr_link=_checked_toss_link(dto.toss_qr_link),
            theme_color=dto.theme_color or "purple",
        )
        created = await self.project_repository.create(project)
        logger.info("Created project %s", created.project_id)
        return await self._to_response(created, viewer_id=user_id)

    async def list_projects(self, user_id: str) -> List[ProjectSummaryDTO]:
        """List the owner's non-deleted projects, newest first."""
        projects = await self.project_repository.get_by_owner(user_id)
        summaries: List[ProjectSummaryDTO] = []
        for project in projects:
            if project.status == "deleted":
                continue
            items = await self.item_repository.get_by_project(project.project_id)
            summaries.append(
                ProjectSummaryDTO(
                    project_id=project.project_id,
                    title=project.title,
                    subtitle=project.subtitle,
                    status=project.status,
                    theme_color=project.theme_color,
                    item_count=len(items),
                    created_at=project.created_at,
                )
            )
        return summaries

    async def get_project(
        self, project_id: str, viewer_id: Optional[str] = None
    ) -> ProjectResponseDTO:
        """Public project page.

        Hidden projects look missing to everyone but the owner.
        """
        project = await self.project_repository.get_by_id(project_id)
        if project is None or not project.is_visible_to(viewer_id):
            raise ProjectNotFoundError(project_id)
        return await self._to_response(project, viewer_id=viewer_id)

    async def update_project(
        self, project_id: str, user_id: str, dto: UpdateProjectDTO
    ) -> ProjectResponseDTO:
        project = await get_owned_project(self.project_repository, project_id, user_id)

        fields = dto.model_fields_set
        account_number = (dto.account_number or "").strip()
        kwargs = {}
        if "toss_qr_link" in fields:
            kwargs["toss_qr_link"] = _checked_toss_link(dto.toss_qr_link)
        if "donation_amounts" in fields:
            amounts = [a for a in dto.donation_amounts or [] if a > 0]
            kwargs["donation_amounts"] = format_donation_amounts(amounts)

        project.update_details(
            title=(dto.title or "").strip() or None,
            subtitle=dto.subtitle.strip() if dto.subtitle is not None else None,
            account_bank=(dto.account_bank or "").strip() or None,
            account_number=self.cipher.encrypt(account_number)
            if account_number
            else None,
            account_holder=(dto.account_holder or "").strip() or None,
            theme_color=dto.theme_color,
            **kwargs,
        )
        if dto.status is not None:
            if dto.status == "deleted":
                project.soft_delete()
            else:
                project.change_status(dto.status)

        updated = await self.project_repository.update(project)
        return await self._to_response(updated, viewer_id=user_id)

    async def delete_project(self, project_id: str, user_id: str) -> None:
        """Soft-delete: the project disappears but its records are kept."""
        project = await get_owned_project(self.project_repository, project_id, user_id)
        project.soft_delete()
        await self.project_repository.update(project)
        logger.info("Deleted project %s", project_id)

    async def _to_response(
        self, project: Project, viewer_id: Optional[str]
    ) -> ProjectResponseDTO:
        items = await self.item_repository.get_by_project(project.project_id)
        item_dtos: List[ItemResponseDTO] = []
        for item in items:
            if not item.is_public:
                continue
            donations = [
                d
                for d in await self.donation_repository.get_by_item(item.item_id)
                if d.is_counted
            ]
            item_dtos.append(
                ItemResponseDTO(
                    item_id=item.item_id,
                    title=item.title,
                    url=item.url,
                    image=item.image,
                    price=item.price,
                    status=item.status,
                    order=item.order,
                    total_donation=sum(d.amount for d in donations),
                    donations=[
                        DonationResponseDTO(**d.model_dump())
                        for d in donations
                    ],
                )
            )

        return ProjectResponseDTO(
            project_id=project.project_id,
            user_id=project.user_id,
            title=project.title,
            subtitle=project.subtitle,
            account_bank=project.account_bank,
            account_number=self.cipher.decrypt(project.account_number),
            account_holder=project.account_holder,
            toss_qr_link=project.toss_qr_link,
            donation_amounts=parse_donation_amounts(
                project.donation_amounts, self.default_donation_amounts
            ),
            theme_color=project.theme_color,
            status=project.status,
            is_owner=project.is_owned_by(viewer_id),
            items=item_dtos,
            created_at=project.created_at,
        )
