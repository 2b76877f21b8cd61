"""Post-deploy smoke checks executed from the portal container."""

from __future__ import annotations

import urllib.error
import urllib.parse
import urllib.request

BASE_URL = "http://localhost:8000"


def request(
    path: str,
    *,
    method: str = "GET",
    form: dict[str, str] | None = None,
    expected: int = 200,
) -> bytes:
    payload = None
    req_headers = {"Accept": "text/html,application/json"}
    if form is not None:
        payload = urllib.parse.urlencode(form).encode("utf-8")
        req_headers["Content-Type"] = "application/x-www-form-urlencoded"

    request_obj = urllib.request.Request(
        f"{BASE_URL}{path}",
        data=payload,
        method=method,
        headers=req_headers,
    )
    try:
        with urllib.request.urlopen(request_obj, timeout=30) as response:
            content = response.read()
            status = response.getcode()
    except urllib.error.HTTPError as exc:  # pragma: no cover - runtime smoke script
        body_text = exc.read().decode("utf-8", errors="ignore")
        raise RuntimeError(f"{method} {path} -> {exc.code}: {body_text}") from exc

    if status != expected:
        raise RuntimeError(f"{method} {path} -> {status}, expected {expected}")
    return content


def main() -> None:
    for endpoint in ["/", "/health", "/ready", "/metrics", "/portal", "/portal?channel=email"]:
        request(endpoint, expected=200)

    page = request(
        "/portal/channel",
        method="POST",
        form={"channel": "email", "payload": "smoke"},
    ).decode("utf-8")
    if '<fieldset id="emailFields">' not in page:
        raise RuntimeError("POST /portal/channel did not activate the e-mail field group")

    page = request(
        "/portal/lookup",
        method="POST",
        form={"search_id": "00000000-0000-0000-0000-000000000000"},
    ).decode("utf-8")
    if 'id="searchResult"' not in page:
        raise RuntimeError("POST /portal/lookup did not render the search panel")

    print("Smoke checks passed.")


if __name__ == "__main__":
    main()
