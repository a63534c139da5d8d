import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any


class ApiError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class ApiClient:
    """Thin JSON client for the score/leaderboard/reward API."""

    def __init__(self, base_url: str, token: str | None = None, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.address: str | None = None
        self.timeout = timeout

    def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        body = None if payload is None else json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(self.base_url + path, data=body, method=method)
        req.add_header("Accept", "application/json")
        if body is not None:
            req.add_header("Content-Type", "application/json")
        if self.token:
            req.add_header("Authorization", f"Bearer {self.token}")

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            raw = e.read()
            try:
                message = json.loads(raw.decode("utf-8")).get("error", e.reason)
            except (ValueError, AttributeError):
                message = str(e.reason)
            raise ApiError(e.code, message) from e
        except urllib.error.URLError as e:
            raise ApiError(0, f"API unreachable: {e.reason}") from e
        return json.loads(raw.decode("utf-8")) if raw else {}

    def _login(self, data: dict[str, Any]) -> dict[str, Any]:
        self.token = data["token"]
        self.address = data["address"]
        return data

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def login_guest(self) -> dict[str, Any]:
        return self._login(self._request("POST", "/auth/guest", {}))

    def login_wallet(self, address: str) -> dict[str, Any]:
        return self._login(self._request("POST", "/auth/wallet", {"address": address}))

    def submit_score(
        self, score: int, run_id: str | None = None, commit: str | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"score": score}
        if run_id is not None:
            payload["runId"] = run_id
        if commit is not None:
            payload["commit"] = commit
        return self._request("POST", "/scores", payload)

    def leaderboard(self, limit: int = 50) -> list[dict[str, Any]]:
        query = urllib.parse.urlencode({"limit": limit})
        return self._request("GET", f"/leaderboard?{query}")["leaderboard"]

    def spin(self, seed: float | None = None) -> dict[str, Any]:
        return self._request("POST", "/wheel/spin", {} if seed is None else {"seed": seed})

    def mint_badge(
        self,
        prize: str | None = None,
        score: int = 0,
        max_tile: int = 0,
        recipient: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"score": score, "maxTile": max_tile}
        if prize is not None:
            payload["prize"] = prize
        if recipient is not None:
            payload["recipient"] = recipient
        return self._request("POST", "/mint/badge", payload)

    def badges(self, address: str) -> list[dict[str, Any]]:
        path = "/mint/badges/" + urllib.parse.quote(address, safe="")
        return self._request("GET", path)["badges"]
