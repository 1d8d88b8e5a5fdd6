"""Payment helpers: Toss deep links, QR scans and donation amounts."""

from .toss_link import (
    TOSS_SEND_PREFIX,
    TossAccount,
    create_link_with_amount,
    extract_account,
    is_valid_toss_link,
)

__all__ = [
    "TOSS_SEND_PREFIX",
    "TossAccount",
    "create_link_with_amount",
    "extract_account",
    "is_valid_toss_link",
]
