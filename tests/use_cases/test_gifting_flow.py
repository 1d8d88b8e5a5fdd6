"""Use case tests over in-memory storage: project, items and donations together."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from wishmoa.application.dtos import (
    CreateDonationDTO,
    CreateItemDTO,
    CreateProjectDTO,
    UpdateItemDTO,
)
from wishmoa.application.use_cases import DonationService, ItemService, ProjectService
from wishmoa.crypto.account_cipher import is_encrypted
from wishmoa.domain.entities import Donation
from wishmoa.domain.errors import (
    InvalidAmountError,
    ItemNotFoundError,
    PermissionDeniedError,
    ProjectNotFoundError,
    RateLimitExceededError,
)
from wishmoa.infrastructure.repositories import DonationRepositoryImpl
from wishmoa.payments.donation_amounts import AmountSelection
from tests.fixtures import InMemoryKeyValueStore

OWNER = "owner-1"
TOSS_LINK = (
    "supertoss://send?bank=%EA%B5%AD%EB%AF%BC%EC%9D%80%ED%96%89"
    "&accountNo=11022334455&amount=0&origin=qr"
)


async def _create_project(
    project_service: ProjectService, toss_qr_link: str | None = TOSS_LINK
) -> str:
    project = await project_service.create_project(
        OWNER,
        CreateProjectDTO(
            title="Minji's birthday",
            account_bank="국민은행",
            account_number="110-234-567890",
            account_holder="Kim Minji",
            toss_qr_link=toss_qr_link,
        ),
    )
    return project.project_id


def _donation(item_id: str, amount: int = 15000, name: str = "Jisoo") -> CreateDonationDTO:
    return CreateDonationDTO(
        item_id=item_id,
        donor_name=name,
        message="Happy birthday!",
        selection=AmountSelection.preset(amount),
    )


@pytest.mark.asyncio
async def test_account_number_is_encrypted_in_storage(
    project_service: ProjectService, store: InMemoryKeyValueStore
) -> None:
    project_id = await _create_project(project_service)

    raw = store.raw(f"project:{project_id}")
    assert raw is not None
    assert "110-234-567890" not in raw

    page = await project_service.get_project(project_id)
    assert page.account_number == "110-234-567890"
    assert len(project_id) == 8


@pytest.mark.asyncio
async def test_donation_totals_on_public_page(
    project_service: ProjectService,
    item_service: ItemService,
    donation_service: DonationService,
) -> None:
    project_id = await _create_project(project_service)
    shoes = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )
    cake = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Cake", price=30000)
    )
    assert (shoes.order, cake.order) == (0, 1)

    first = await donation_service.create_donation(_donation(shoes.item_id, 15000))
    await donation_service.create_donation(
        CreateDonationDTO(
            item_id=shoes.item_id,
            donor_name="Minho",
            selection=AmountSelection.custom(),
            custom_amount=42000,
        )
    )
    await donation_service.change_status(first.donation_id, OWNER, "confirmed")

    page = await project_service.get_project(project_id)
    totals = {item.title: item.total_donation for item in page.items}
    assert totals == {"Shoes": 57000, "Cake": 0}

    listing = await donation_service.list_donations(project_id, OWNER)
    assert len(listing.donations) == 2
    assert listing.confirmed_total == 15000

    pending = await donation_service.list_donations(project_id, OWNER, "pending")
    assert [d.amount for d in pending.donations] == [42000]
    assert pending.confirmed_total == 0


@pytest.mark.asyncio
async def test_deleted_donations_leave_the_totals(
    project_service: ProjectService,
    item_service: ItemService,
    donation_service: DonationService,
) -> None:
    project_id = await _create_project(project_service)
    item = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )
    donation = await donation_service.create_donation(_donation(item.item_id))

    await donation_service.delete_donation(donation.donation_id, OWNER)

    page = await project_service.get_project(project_id)
    assert page.items[0].total_donation == 0
    listing = await donation_service.list_donations(project_id, OWNER)
    assert listing.donations == []


@pytest.mark.asyncio
async def test_only_owner_settles_donations(
    project_service: ProjectService,
    item_service: ItemService,
    donation_service: DonationService,
) -> None:
    project_id = await _create_project(project_service)
    item = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )
    donation = await donation_service.create_donation(_donation(item.item_id))

    with pytest.raises(PermissionDeniedError):
        await donation_service.change_status(donation.donation_id, "guest", "confirmed")
    with pytest.raises(PermissionDeniedError):
        await donation_service.list_donations(project_id, "guest")


@pytest.mark.asyncio
async def test_cannot_donate_to_hidden_or_completed_items(
    project_service: ProjectService,
    item_service: ItemService,
    donation_service: DonationService,
) -> None:
    project_id = await _create_project(project_service)
    item = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )
    await item_service.update_item(item.item_id, OWNER, UpdateItemDTO(status="completed"))

    with pytest.raises(ItemNotFoundError):
        await donation_service.create_donation(_donation(item.item_id))

    # Completed items stay on the public page, hidden ones do not
    page = await project_service.get_project(project_id)
    assert [i.status for i in page.items] == ["completed"]
    hidden = await item_service.change_status(item.item_id, OWNER, "hidden")
    assert hidden.status == "hidden"
    page = await project_service.get_project(project_id)
    assert page.items == []

    with pytest.raises(ValueError):
        await item_service.change_status(item.item_id, OWNER, "deleted")


@pytest.mark.asyncio
@pytest.mark.parametrize("preset_amount", [0, -15000])
async def test_preset_from_payload_must_be_positive(
    project_service: ProjectService,
    item_service: ItemService,
    donation_service: DonationService,
    donation_repository: DonationRepositoryImpl,
    preset_amount: int,
) -> None:
    project_id = await _create_project(project_service)
    item = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )
    dto = CreateDonationDTO.model_validate(
        {
            "item_id": item.item_id,
            "donor_name": "Jisoo",
            "selection": {"preset_amount": preset_amount},
        }
    )

    with pytest.raises(InvalidAmountError):
        await donation_service.create_donation(dto)
    assert await donation_repository.get_by_project(project_id) == []


@pytest.mark.asyncio
async def test_custom_amount_must_be_positive(
    project_service: ProjectService,
    item_service: ItemService,
    donation_service: DonationService,
) -> None:
    project_id = await _create_project(project_service)
    item = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )

    with pytest.raises(InvalidAmountError):
        await donation_service.create_donation(
            CreateDonationDTO(
                item_id=item.item_id,
                donor_name="Jisoo",
                selection=AmountSelection.custom(),
                custom_amount=0,
            )
        )


@pytest.mark.asyncio
async def test_donations_are_rate_limited_per_client(
    project_service: ProjectService,
    item_service: ItemService,
    donation_service: DonationService,
) -> None:
    project_id = await _create_project(project_service)
    item = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )

    for _ in range(60):
        await donation_service.create_donation(_donation(item.item_id), client_id="1.2.3.4")

    with pytest.raises(RateLimitExceededError):
        await donation_service.create_donation(_donation(item.item_id), client_id="1.2.3.4")
    await donation_service.create_donation(_donation(item.item_id), client_id="5.6.7.8")


@pytest.mark.asyncio
async def test_transfer_options_with_toss_link(
    project_service: ProjectService, donation_service: DonationService
) -> None:
    project_id = await _create_project(project_service)

    options = await donation_service.transfer_options(project_id, 25000)

    assert options.account_text == "110-234-567890 국민은행 (Kim Minji)"
    assert options.toss_link == TOSS_LINK.replace("amount=0", "amount=25000")


@pytest.mark.asyncio
async def test_transfer_options_without_toss_link(
    project_service: ProjectService, donation_service: DonationService
) -> None:
    project_id = await _create_project(project_service, toss_qr_link=None)

    options = await donation_service.transfer_options(project_id, 25000)

    assert options.toss_link is None
    assert options.account_number == "110-234-567890"


@pytest.mark.asyncio
async def test_transfer_options_for_deleted_project(
    project_service: ProjectService, donation_service: DonationService
) -> None:
    project_id = await _create_project(project_service)
    await project_service.delete_project(project_id, OWNER)

    with pytest.raises(ProjectNotFoundError):
        await donation_service.transfer_options(project_id, 25000)


@pytest.mark.asyncio
async def test_reorder_items(
    project_service: ProjectService, item_service: ItemService
) -> None:
    project_id = await _create_project(project_service)
    ids = [
        (await item_service.add_item(
            project_id, OWNER, CreateItemDTO(title=title, price=10000)
        )).item_id
        for title in ("A", "B", "C")
    ]

    await item_service.reorder_items(project_id, OWNER, [ids[2], ids[0], ids[1]])

    listed = await item_service.list_items(project_id, OWNER)
    assert [i.title for i in listed] == ["C", "A", "B"]

    with pytest.raises(ItemNotFoundError):
        await item_service.reorder_items(project_id, OWNER, ["missing"])
    with pytest.raises(ValueError):
        await item_service.reorder_items(project_id, OWNER, [ids[0], ids[0]])


@pytest.mark.asyncio
async def test_deleted_items_disappear(
    project_service: ProjectService, item_service: ItemService
) -> None:
    project_id = await _create_project(project_service)
    item = await item_service.add_item(
        project_id, OWNER, CreateItemDTO(title="Shoes", price=90000)
    )

    await item_service.delete_item(item.item_id, OWNER)

    assert await item_service.list_items(project_id, OWNER) == []
    with pytest.raises(ItemNotFoundError):
        await item_service.delete_item(item.item_id, OWNER)


@pytest.mark.asyncio
async def test_owner_dashboard_lists_live_projects(
    project_service: ProjectService, item_service: ItemService
) -> None:
    kept = await _create_project(project_service)
    dropped = await _create_project(project_service)
    await item_service.add_item(kept, OWNER, CreateItemDTO(title="Shoes", price=9000))
    await project_service.delete_project(dropped, OWNER)

    summaries = await project_service.list_projects(OWNER)

    assert [(s.project_id, s.item_count) for s in summaries] == [(kept, 1)]
    assert await project_service.list_projects("someone-else") == []


@pytest.mark.asyncio
async def test_donations_by_item_are_newest_first(
    donation_repository: DonationRepositoryImpl,
) -> None:
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for minutes, name in ((0, "first"), (5, "second"), (10, "third")):
        await donation_repository.create(
            Donation(
                item_id="item-1",
                project_id="p",
                donor_name=name,
                amount=1000,
                created_at=base + timedelta(minutes=minutes),
            )
        )

    donations = await donation_repository.get_by_item("item-1")

    assert [d.donor_name for d in donations] == ["third", "second", "first"]


@pytest.mark.asyncio
async def test_project_stored_account_is_encrypted_format(
    project_service: ProjectService, project_repository
) -> None:
    project_id = await _create_project(project_service)
    stored = await project_repository.get_by_id(project_id)
    assert stored is not None
    assert is_encrypted(stored.account_number)
