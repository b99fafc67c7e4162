"""
Minimal Flutterwave REST client for bank listing and account resolution
"""
from typing import Any, Dict, List, Optional
import requests
import logging

from config import FLUTTERWAVE_BASE_URL, OUTBOUND_HTTP_TIMEOUT

logger = logging.getLogger(__name__)


class FlutterwaveError(Exception):
    """Raised for any failed call to the provider (network, status, payload)"""


class FlutterwaveClient:
    def __init__(self, secret_key: str, base_url: str = FLUTTERWAVE_BASE_URL, timeout: int = OUTBOUND_HTTP_TIMEOUT):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, json_body: Optional[dict] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, headers=self._headers(), json=json_body, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Flutterwave request to {path} failed: {e}")
            raise FlutterwaveError(f"failed to make request: {e}")

        body = response.text or ""
        if body.lstrip().startswith("<"):
            raise FlutterwaveError(
                f"API returned HTML instead of JSON (status {response.status_code}). "
                f"Response preview: {body[:200]}"
            )

        try:
            payload = response.json()
        except ValueError:
            if response.status_code != 200:
                raise FlutterwaveError(f"API returned status {response.status_code}: {body}")
            raise FlutterwaveError(f"failed to parse JSON response (status {response.status_code}): {body[:200]}")

        if response.status_code != 200:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise FlutterwaveError(f"API error (status {response.status_code}): {message or body}")

        if not isinstance(payload, dict) or payload.get("status") != "success":
            message = payload.get("message") if isinstance(payload, dict) else body
            raise FlutterwaveError(f"API error: {message}")

        return payload

    def get_banks(self, country: str) -> List[Dict[str, Any]]:
        payload = self._request("GET", f"/v3/banks/{country}")
        return payload.get("data") or []

    def verify_account(self, account_number: str, bank_code: str) -> Dict[str, Any]:
        payload = self._request(
            "POST",
            "/v3/accounts/resolve",
            {"account_number": account_number, "account_bank": bank_code},
        )
        data = payload.get("data")
        if not isinstance(data, dict):
            raise FlutterwaveError("verification failed: response did not include account data")
        return data
