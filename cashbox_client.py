"""Team Cashbox API client.

A thin wrapper around the cashbox REST API built on ``requests``.  It is
meant for scripts and integrations (for example a chat bot that books
drink penalties, or a cron job that triggers the scheduled report run)
that should not deal with URLs and status codes themselves.

All methods return the decoded JSON body.  Any non-2xx response raises
:class:`CashboxAPIError` carrying the HTTP status code and the server's
``detail``; transport failures raise it with ``status_code=None``.

Example::

    api = CashboxClient(base_url="http://localhost:8000")
    team = api.create_team("FC Kneipe", "fck-1")
    member = api.add_member(team["id"], user_id)
    api.create_penalty(member["id"], drink_type_id, "Round for the team")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests


logger = logging.getLogger(__name__)


class CashboxAPIError(Exception):
    """Raised when the API answers with an error or cannot be reached.

    Attributes:
        status_code: HTTP status code, or ``None`` for transport errors.
        detail: The ``detail`` field of the error body (a string, or a
            list of ``{"field", "message"}`` dicts for validation errors).
    """

    def __init__(self, status_code: Optional[int], detail: Any) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}" if status_code else str(detail))


class CashboxClient:
    """Client for the Team Cashbox API v1."""

    def __init__(
        self,
        *,
        base_url: str,
        api_prefix: str = "/api/v1",
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Server root, e.g. ``https://cashbox.example.com``.
            api_prefix: Path prefix of the versioned API.
            timeout: Per-request timeout in seconds.
            session: Optional requests session to reuse connections or
                inject adapters; one is created if omitted.
        """
        self.base_url = base_url.rstrip("/") + api_prefix
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method, url=url, params=params, json=json_body, timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            raise CashboxAPIError(None, str(exc)) from exc

        if not response.ok:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            logger.error("API request failed (%s): %s", response.status_code, detail)
            raise CashboxAPIError(response.status_code, detail)
        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Users and teams
    # ------------------------------------------------------------------
    def create_user(self, first_name: str, last_name: str, email: Optional[str] = None,
                    phone: Optional[str] = None) -> Dict[str, Any]:
        payload = {"first_name": first_name, "last_name": last_name, "email": email, "phone": phone}
        return self._request("POST", "/users/", json_body=payload)

    def create_team(self, name: str, external_id: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {"name": name, "external_id": external_id, "metadata": metadata or {}}
        return self._request("POST", "/teams/", json_body=payload)

    def get_team(self, team_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/teams/{team_id}")

    def list_teams(self, active: Optional[bool] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/teams/", params={"active": active})

    def rename_team(self, team_id: str, name: str) -> Dict[str, Any]:
        return self._request("PUT", f"/teams/{team_id}/name", json_body={"name": name})

    def add_member(self, team_id: str, user_id: str, roles: Optional[List[str]] = None) -> Dict[str, Any]:
        return self._request("POST", f"/teams/{team_id}/members", json_body={"user_id": user_id, "roles": roles})

    def list_members(self, team_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/teams/{team_id}/members")

    # ------------------------------------------------------------------
    # Penalties and payments
    # ------------------------------------------------------------------
    def create_penalty(self, team_user_id: str, penalty_type_id: str, reason: str,
                       amount: Optional[int] = None, currency: Optional[str] = None) -> Dict[str, Any]:
        """Charge a penalty.

        Args:
            team_user_id: Membership the penalty is charged to.
            penalty_type_id: Catalogue entry; its default amount is used
                when ``amount`` is omitted.
            reason: Free text shown to the member.
            amount: Optional amount in minor units (cents).
            currency: Optional ISO code, defaults to the server setting.
        """
        payload = {
            "team_user_id": team_user_id,
            "penalty_type_id": penalty_type_id,
            "reason": reason,
            "amount": amount,
            "currency": currency,
        }
        return self._request("POST", "/penalties/", json_body=payload)

    def pay_penalty(self, penalty_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/penalties/{penalty_id}/pay")

    def archive_penalty(self, penalty_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/penalties/{penalty_id}/archive")

    def list_penalties(self, *, team_id: Optional[str] = None, user_id: Optional[str] = None,
                       paid: Optional[bool] = None, archived: Optional[bool] = None) -> List[Dict[str, Any]]:
        params = {"team_id": team_id, "user_id": user_id, "paid": paid, "archived": archived}
        return self._request("GET", "/penalties/", params=params)

    def create_payment(self, team_user_id: str, amount: int, type: str = "cash",
                       description: Optional[str] = None, reference: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "team_user_id": team_user_id,
            "amount": amount,
            "type": type,
            "description": description,
            "reference": reference,
        }
        return self._request("POST", "/payments/", json_body=payload)

    # ------------------------------------------------------------------
    # Contribution templates and contribution payments
    # ------------------------------------------------------------------
    def create_contribution_template(self, team_id: str, name: str, amount: int, *,
                                     currency: Optional[str] = None, due_days: Optional[int] = None,
                                     recurring: bool = False,
                                     recurrence_pattern: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "team_id": team_id,
            "name": name,
            "amount": amount,
            "currency": currency,
            "due_days": due_days,
            "recurring": recurring,
            "recurrence_pattern": recurrence_pattern,
        }
        return self._request("POST", "/contribution-templates/", json_body=payload)

    def apply_contribution_template(self, template_id: str, team_user_ids: List[str], *,
                                    due_date: Optional[str] = None,
                                    amount: Optional[int] = None) -> Dict[str, Any]:
        """Issue the template's contribution to several memberships.

        Returns:
            Dict with ``template``, ``contributions`` and ``count``.
        """
        payload = {"team_user_ids": team_user_ids, "due_date": due_date, "amount": amount}
        return self._request("POST", f"/contribution-templates/{template_id}/apply", json_body=payload)

    def record_contribution_payment(self, contribution_id: str, amount: int, *,
                                    payment_method: Optional[str] = None,
                                    reference: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "contribution_id": contribution_id,
            "amount": amount,
            "payment_method": payment_method,
            "reference": reference,
        }
        return self._request("POST", "/contribution-payments/", json_body=payload)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def list_notifications(self, user_id: str, unread_only: bool = False) -> List[Dict[str, Any]]:
        return self._request("GET", "/notifications/", params={"user_id": user_id, "unread_only": unread_only})

    def unread_count(self, user_id: str) -> int:
        return self._request("GET", "/notifications/unread-count", params={"user_id": user_id})["count"]

    def mark_notification_read(self, notification_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/notifications/{notification_id}/read")

    # ------------------------------------------------------------------
    # Reports and periodic jobs
    # ------------------------------------------------------------------
    def create_report(self, created_by: str, name: str, type: str, parameters: Dict[str, Any],
                      cron_expression: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "created_by": created_by,
            "name": name,
            "type": type,
            "parameters": parameters,
            "scheduled": cron_expression is not None,
            "cron_expression": cron_expression,
        }
        return self._request("POST", "/reports/", json_body=payload)

    def generate_report(self, report_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/reports/{report_id}/generate")

    def run_scheduled_reports(self) -> int:
        return self._request("POST", "/reports/scheduled/run")["generated"]

    def run_recurring_contributions(self) -> int:
        return self._request("POST", "/contributions/recurring/run")["created"]
