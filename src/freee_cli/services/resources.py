"""Company-scoped resource services for the freee accounting API.

Each service maps CLI parameters onto one REST collection under /api/1.
Every call is scoped by ``company_id``.
"""

from __future__ import annotations

from typing import Any

import httpx

from freee_cli.client import FreeeClient
from freee_cli.utils.errors import ApiRequestFailed


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    """Drop unset (None) values so they are not sent."""
    return {k: v for k, v in values.items() if v is not None}


def _json(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, rejecting HTML error pages served with 2xx."""
    try:
        data = response.json()
    except ValueError as e:
        raise ApiRequestFailed(response.status_code, "Unexpected non-JSON response") from e
    if not isinstance(data, dict):
        raise ApiRequestFailed(response.status_code, "Unexpected JSON response shape")
    return data


class ResourceService:
    """CRUD over one freee collection.

    Subclasses set ``path`` (e.g. "/api/1/deals"), the JSON keys for the
    collection and single item, and whether write bodies must be wrapped
    under the item key.
    """

    path: str = ""
    collection_key: str = ""
    item_key: str = ""
    wrap_body: bool = False

    def __init__(self, client: FreeeClient) -> None:
        self._client = client

    def list(self, company_id: int, **filters: Any) -> list[dict[str, Any]]:
        params = _compact({"company_id": company_id, **filters})
        response = self._client.get(self.path, params=params)
        return _json(response).get(self.collection_key, [])

    def get(self, company_id: int, item_id: int | str) -> dict[str, Any]:
        response = self._client.get(f"{self.path}/{item_id}", params={"company_id": company_id})
        return _json(response).get(self.item_key, {})

    def create(self, company_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        response = self._client.post(self.path, body=self._body(company_id, fields))
        return _json(response).get(self.item_key, {})

    def update(self, company_id: int, item_id: int | str, fields: dict[str, Any]) -> dict[str, Any]:
        response = self._client.put(f"{self.path}/{item_id}", body=self._body(company_id, fields))
        return _json(response).get(self.item_key, {})

    def delete(self, company_id: int, item_id: int | str) -> None:
        self._client.delete(f"{self.path}/{item_id}", params={"company_id": company_id})

    def _body(self, company_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        body = {"company_id": company_id, **_compact(fields)}
        return {self.item_key: body} if self.wrap_body else body


class DealService(ResourceService):
    path = "/api/1/deals"
    collection_key = "deals"
    item_key = "deal"


class PartnerService(ResourceService):
    path = "/api/1/partners"
    collection_key = "partners"
    item_key = "partner"


class AccountItemService(ResourceService):
    path = "/api/1/account_items"
    collection_key = "account_items"
    item_key = "account_item"
    wrap_body = True


class TransferService(ResourceService):
    path = "/api/1/transfers"
    collection_key = "transfers"
    item_key = "transfer"


class WalletTxnService(ResourceService):
    path = "/api/1/wallet_txns"
    collection_key = "wallet_txns"
    item_key = "wallet_txn"


class SectionService(ResourceService):
    path = "/api/1/sections"
    collection_key = "sections"
    item_key = "section"
    wrap_body = True


class TagService(ResourceService):
    path = "/api/1/tags"
    collection_key = "tags"
    item_key = "tag"


class WalletableService(ResourceService):
    """Walletables are addressed by type and id (bank_account/credit_card/wallet)."""

    path = "/api/1/walletables"
    collection_key = "walletables"
    item_key = "walletable"
    wrap_body = True

    def get_typed(self, company_id: int, walletable_type: str, item_id: int | str) -> dict[str, Any]:
        return self.get(company_id, f"{walletable_type}/{item_id}")

    def update_typed(
        self, company_id: int, walletable_type: str, item_id: int | str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        return self.update(company_id, f"{walletable_type}/{item_id}", fields)

    def delete_typed(self, company_id: int, walletable_type: str, item_id: int | str) -> None:
        self.delete(company_id, f"{walletable_type}/{item_id}")


class CompanyService:
    """Companies the authenticated user belongs to (not company-scoped)."""

    def __init__(self, client: FreeeClient) -> None:
        self._client = client

    def list(self) -> list[dict[str, Any]]:
        return _json(self._client.get("/api/1/companies")).get("companies", [])

    def get(self, company_id: int) -> dict[str, Any]:
        return _json(self._client.get(f"/api/1/companies/{company_id}")).get("company", {})


class BankService:
    """Connectable bank/card services (global catalogue, not company-scoped)."""

    def __init__(self, client: FreeeClient) -> None:
        self._client = client

    def list(self, limit: int = 20, offset: int = 0) -> list[dict[str, Any]]:
        response = self._client.get("/api/1/banks", params={"limit": limit, "offset": offset})
        return _json(response).get("banks", [])

    def get(self, bank_id: int) -> dict[str, Any]:
        return _json(self._client.get(f"/api/1/banks/{bank_id}")).get("bank", {})


class TrialBalanceService:
    """Trial balance reports (profit & loss or balance sheet)."""

    ENDPOINTS = {
        "pl": ("/api/1/reports/trial_pl", "trial_pl"),
        "bs": ("/api/1/reports/trial_bs", "trial_bs"),
    }

    def __init__(self, client: FreeeClient) -> None:
        self._client = client

    def get(
        self,
        company_id: int,
        report_type: str = "pl",
        fiscal_year: int | None = None,
        start_month: int | None = None,
        end_month: int | None = None,
    ) -> list[dict[str, Any]]:
        if report_type not in self.ENDPOINTS:
            raise ValueError(f"Invalid trial balance type: {report_type} (use pl or bs)")
        path, key = self.ENDPOINTS[report_type]
        params = _compact({
            "company_id": company_id,
            "fiscal_year": fiscal_year,
            "start_month": start_month,
            "end_month": end_month,
        })
        data = _json(self._client.get(path, params=params))
        return (data.get(key) or {}).get("balances", [])
