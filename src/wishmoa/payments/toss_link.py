"""Toss transfer deep links scanned from a payee's QR code.

A Toss "QR transfer" code decodes to a link such as

    supertoss://send?bank=%EA%B5%AD%EB%AF%BC%EC%9D%80%ED%96%89&accountNo=11022334455&amount=0

Opening the link on a phone launches the Toss app on its transfer screen with
the payee prefilled. We only read the payee fields and rewrite `amount`; the
rest of the query is opaque and is carried through byte-for-byte. Nothing in
this module raises: unusable input gives None or False.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Optional
from urllib.parse import unquote_plus, urlsplit

from pydantic import BaseModel

logger = logging.getLogger(__name__)

TOSS_SCHEME = "supertoss"
TOSS_SEND_PREFIX = f"{TOSS_SCHEME}://send?"

BANK_PARAM = "bank"
ACCOUNT_PARAM = "accountNo"
AMOUNT_PARAM = "amount"


class TossAccount(BaseModel):
    """Payee details carried by a Toss transfer link."""

    bank_name: str
    account_number: str


class _LinkParts(NamedTuple):
    base: str
    query: str
    fragment: Optional[str]


def _split_link(raw: str) -> Optional[_LinkParts]:
    """Split an absolute URI into base, raw query and fragment."""
    if not isinstance(raw, str) or not raw:
        return None
    if any(ch.isspace() for ch in raw):
        return None
    try:
        scheme = urlsplit(raw).scheme
    except ValueError:
        return None
    if not scheme:
        return None

    rest, hash_sign, fragment = raw.partition("#")
    base, _, query = rest.partition("?")
    return _LinkParts(base, query, fragment if hash_sign else None)


def _query_pairs(query: str) -> list[tuple[str, str]]:
    """Return (decoded key, raw value) pairs in their original order."""
    pairs: list[tuple[str, str]] = []
    for chunk in query.split("&"):
        if not chunk:
            continue
        key, _, value = chunk.partition("=")
        pairs.append((unquote_plus(key), value))
    return pairs


def _first(pairs: list[tuple[str, str]], key: str) -> Optional[str]:
    for name, value in pairs:
        if name == key:
            return value
    return None


def is_valid_toss_link(raw: str) -> bool:
    """True for a Toss send link that names a payee account."""
    if not isinstance(raw, str) or not raw.startswith(TOSS_SEND_PREFIX):
        return False
    query = raw[len(TOSS_SEND_PREFIX) :].partition("#")[0]
    return _first(_query_pairs(query), ACCOUNT_PARAM) is not None


def extract_account(raw: str) -> Optional[TossAccount]:
    """Read bank name and account number from a Toss link.

    Returns None when either value is missing, which callers treat as
    "nothing to auto-fill".
    """
    parts = _split_link(raw)
    if parts is None:
        return None
    pairs = _query_pairs(parts.query)
    bank = _first(pairs, BANK_PARAM)
    account_number = _first(pairs, ACCOUNT_PARAM)
    if not bank or not account_number:
        return None
    bank_name = unquote_plus(bank)
    if not bank_name:
        return None
    return TossAccount(bank_name=bank_name, account_number=account_number)


def create_link_with_amount(raw: str, amount: int) -> Optional[str]:
    """Return `raw` with its `amount` parameter set to `amount`.

    The first `amount` pair is rewritten in place and later duplicates are
    dropped; when absent it is appended. None if `raw` is not an absolute URI
    or `amount` is not a positive integer.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        return None
    parts = _split_link(raw)
    if parts is None:
        logger.info("Cannot derive Toss link: stored link is not a URI")
        return None

    new_pair = f"{AMOUNT_PARAM}={amount}"
    chunks: list[str] = []
    replaced = False
    for chunk in parts.query.split("&") if parts.query else []:
        key = unquote_plus(chunk.partition("=")[0])
        if key == AMOUNT_PARAM:
            if not replaced:
                chunks.append(new_pair)
                replaced = True
            continue
        chunks.append(chunk)
    if not replaced:
        chunks.append(new_pair)

    link = f"{parts.base}?{'&'.join(chunks)}"
    if parts.fragment is not None:
        link = f"{link}#{parts.fragment}"
    return link
