# medconnect/client.py
"""HTTP client for the MedConnect API.

One ``ApiClient`` per process: base URL, token store and retry policy are
passed in. Idempotent requests are retried on 5xx and connection failures
with exponential backoff (1s, 2s, 4s by default); POST never is. A 401 on
an authenticated call clears the stored token and fires ``on_auth_expired``.
"""
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import requests
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE", "HEAD", "OPTIONS"})


class ApiError(Exception):
    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


class _RetryableResponse(Exception):
    def __init__(self, response: requests.Response):
        self.response = response
        super().__init__(response.status_code)


class RetryPolicy:
    def __init__(self, max_retries: int = 3, backoff: float = 1.0, max_wait: float = 8.0):
        self.max_retries = max_retries
        self.backoff = backoff
        self.max_wait = max_wait

    def retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.backoff, min=self.backoff, max=self.max_wait),
            retry=retry_if_exception_type((
                requests.exceptions.ConnectionError,
                requests.exceptions.Timeout,
                _RetryableResponse,
            )),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )


class TokenStore:
    """In-memory session holder; swap for anything with get/set/clear."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


def _message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Request failed"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason or "Request failed"


class ApiClient:
    def __init__(
        self,
        base_url: str,
        token_store: Optional[TokenStore] = None,
        retry_policy: Optional[RetryPolicy] = None,
        timeout: float = 15,
        on_auth_expired: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.tokens = token_store or TokenStore()
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
        self.on_auth_expired = on_auth_expired
        self.session = session or requests.Session()

    # ---- transport

    def _send(self, method: str, path: str, headers: Dict[str, str], **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, f"{self.base_url}{path}", headers=headers, **kwargs)
        if response.status_code >= 500:
            raise _RetryableResponse(response)
        return response

    def request(self, method: str, path: str, **kwargs) -> Any:
        method = method.upper()
        headers = {"Content-Type": "application/json", **kwargs.pop("headers", {})}
        token = self.tokens.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            if method in IDEMPOTENT_METHODS:
                response = self.retry_policy.retrying()(self._send, method, path, headers, **kwargs)
            else:
                response = self._send(method, path, headers, **kwargs)
        except _RetryableResponse as exc:
            logger.error("Server error on %s %s: %s", method, path, exc.response.status_code)
            raise ApiError(exc.response.status_code, _message(exc.response))
        except requests.exceptions.RequestException as exc:
            raise ApiError(None, f"Network error: {exc}")

        if response.status_code == 401 and token:
            logger.info("Authentication rejected, clearing session")
            self.tokens.clear()
            if self.on_auth_expired:
                self.on_auth_expired()
        if response.status_code >= 400:
            raise ApiError(response.status_code, _message(response))
        return response.json() if response.content else None

    def is_logged_in(self) -> bool:
        return bool(self.tokens.get())

    # ---- users

    def register(self, name: str, email: str, password: str, is_doctor: bool = False, phone_number: str = "") -> dict:
        user = self.request("POST", "/users", json={
            "name": name,
            "email": email,
            "password": password,
            "isDoctor": is_doctor,
            "phoneNumber": phone_number,
        })
        self.tokens.set(user["token"])
        return user

    def login(self, email: str, password: str) -> dict:
        user = self.request("POST", "/users/login", json={"email": email, "password": password})
        self.tokens.set(user["token"])
        return user

    def logout(self) -> None:
        self.tokens.clear()

    def get_profile(self) -> dict:
        return self.request("GET", "/users/profile")

    def update_profile(self, **fields) -> dict:
        user = self.request("PUT", "/users/profile", json=fields)
        self.tokens.set(user["token"])
        return user

    # ---- doctors

    def list_doctors(self, specialization: Optional[str] = None, search: Optional[str] = None,
                     limit: Optional[int] = None) -> List[dict]:
        params = {k: v for k, v in (("specialization", specialization), ("search", search), ("limit", limit)) if v}
        return self.request("GET", "/doctors", params=params)

    def get_doctor(self, doctor_id: int) -> dict:
        return self.request("GET", f"/doctors/{doctor_id}")

    def create_doctor(self, **fields) -> dict:
        return self.request("POST", "/doctors", json=fields)

    def update_doctor(self, doctor_id: int, **fields) -> dict:
        return self.request("PUT", f"/doctors/{doctor_id}", json=fields)

    # ---- appointments

    def create_appointment(self, doctor_id: int, appointment_date: date, time_slot: str, reason: str,
                           payment_method: str = "card", is_paid: bool = False) -> dict:
        return self.request("POST", "/appointments", json={
            "doctor": doctor_id,
            "appointmentDate": appointment_date.isoformat(),
            "timeSlot": time_slot,
            "reason": reason,
            "paymentMethod": payment_method,
            "isPaid": is_paid,
        })

    def list_appointments(self) -> List[dict]:
        return self.request("GET", "/appointments")

    def list_doctor_appointments(self) -> List[dict]:
        return self.request("GET", "/appointments/doctor")

    def get_appointment(self, appointment_id: int) -> dict:
        return self.request("GET", f"/appointments/{appointment_id}")

    def update_appointment_status(self, appointment_id: int, status: Optional[str] = None,
                                  notes: Optional[str] = None) -> dict:
        body = {k: v for k, v in (("status", status), ("notes", notes)) if v is not None}
        return self.request("PUT", f"/appointments/{appointment_id}", json=body)

    def cancel_appointment(self, appointment_id: int) -> dict:
        return self.request("PUT", f"/appointments/{appointment_id}/cancel")
