"""Turn the text decoded from an uploaded QR image into form auto-fill data."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

from .toss_link import TossAccount, extract_account, is_valid_toss_link

QR_NOT_RECOGNIZED = "QR code not recognized"
QR_NOT_TOSS = "Not a Toss transfer QR code"


class QrScanResult(BaseModel):
    status: Literal["none", "success", "error"] = "none"
    toss_link: Optional[str] = None
    account: Optional[TossAccount] = None
    error: Optional[str] = None


def apply_scanned_qr(decoded: Optional[str]) -> QrScanResult:
    """Validate decoded QR text and pull out the payee, if any.

    A valid link without payee fields is still a success; `account` is then
    None and the form keeps whatever the owner typed.
    """
    if not decoded:
        return QrScanResult(status="error", error=QR_NOT_RECOGNIZED)
    if not is_valid_toss_link(decoded):
        return QrScanResult(status="error", error=QR_NOT_TOSS)
    return QrScanResult(
        status="success", toss_link=decoded, account=extract_account(decoded)
    )
