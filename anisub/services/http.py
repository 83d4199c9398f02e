"""Fetch helpers over ``httpx.AsyncClient``.

Failures never raise: a non-success status, a transport error, or an
undecodable JSON body all come back as ``None`` after a warning.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

log = logging.getLogger("anisub.http")


async def _get(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Optional[httpx.Response]:
    try:
        resp = await client.get(url, headers=headers, params=params)
    except httpx.HTTPError as exc:
        log.warning("Request to %s failed: %s", url, exc)
        return None
    if resp.status_code >= 400:
        log.warning("Request to %s failed with status: %s", url, resp.status_code)
        return None
    return resp


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    resp = await _get(client, url, headers=headers, params=params)
    if resp is None:
        return None
    text = resp.text
    if not text:
        log.warning("Received empty response from %s", url)
        return None
    return text


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Optional[Any]:
    resp = await _get(client, url, headers=headers, params=params)
    if resp is None:
        return None
    try:
        return resp.json()
    except ValueError as exc:
        log.warning("Response from %s is not JSON: %s", url, exc)
        return None
