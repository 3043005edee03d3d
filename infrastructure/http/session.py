# infrastructure/http/session.py
from __future__ import annotations

from typing import Mapping

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def _wrap_with_timeout(request_func, default_timeout: float):
    def wrapped(method, url, **kwargs):
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = default_timeout
        return request_func(method, url, **kwargs)

    return wrapped


def build_session(
    user_agent: str,
    *,
    retries: int = 0,
    backoff: float = 0.3,
    timeout: float = 15.0,
    headers: Mapping[str, str] | None = None,
) -> requests.Session:
    """Return a ``requests.Session`` with a default timeout and User-Agent.

    ``retries`` only applies to transient gateway statuses; connection errors
    and read timeouts are raised to the caller.
    """

    s = requests.Session()
    s.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
    if headers:
        s.headers.update(dict(headers))

    retry = Retry(
        total=max(int(retries), 0),
        connect=0,
        read=0,
        backoff_factor=backoff,
        status_forcelist=[429, 502, 503, 504],
        allowed_methods=["GET", "POST"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)

    # envolver para tener timeout por defecto
    s.request = _wrap_with_timeout(s.request, timeout)  # type: ignore[method-assign]
    return s


__all__ = ["build_session"]
