from __future__ import annotations

import os
from typing import Any, Protocol

import requests

from portfolio.models import Device, DeviceInput


DEFAULT_BASE_URL = "http://127.0.0.1:3000/api"
DEFAULT_TIMEOUT_S = 30.0


class SyncError(RuntimeError):
    pass


class DeviceStore(Protocol):
    def list(self) -> list[Device]: ...
    def create(self, data: DeviceInput) -> Device: ...
    def update(self, device_id: str, data: DeviceInput) -> Device: ...
    def delete(self, device_id: str) -> None: ...


def _base_url() -> str:
    return os.getenv("ASSET_TRACKER_API_URL", DEFAULT_BASE_URL).rstrip("/")


def _timeout() -> float:
    raw = os.getenv("ASSET_TRACKER_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        return float(raw)
    except ValueError:
        raise SyncError(f"ASSET_TRACKER_TIMEOUT invalide: {raw!r}") from None


def _parse_device(data: Any) -> Device:
    try:
        return Device.from_payload(data)
    except (TypeError, ValueError) as e:
        raise SyncError(f"Réponse inattendue du store: {e}") from e


class StoreClient:
    """
    Client HTTP/JSON du store distant (système de référence).
      GET    {base}/devices         -> liste complète
      POST   {base}/devices         -> enregistrement créé (id attribué par le store)
      PUT    {base}/devices/{id}    -> remplacement complet
      DELETE {base}/devices/{id}    -> 2xx = succès
    Toute erreur (réseau, statut, JSON) -> SyncError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or _base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else _timeout()
        self.session = session or requests.Session()

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, "devices", *parts])

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
            r.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise SyncError(f"{method} {url} a échoué (HTTP {status})") from e
        except requests.RequestException as e:
            raise SyncError(f"{method} {url} injoignable: {e}") from e
        return r

    def _json(self, r: requests.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise SyncError(f"Réponse non JSON ({r.url})") from e

    def list(self) -> list[Device]:
        data = self._json(self._request("GET", self._url()))
        if not isinstance(data, list):
            raise SyncError(f"Réponse inattendue: liste attendue, reçu {type(data).__name__}.")
        return [_parse_device(item) for item in data]

    def create(self, data: DeviceInput) -> Device:
        r = self._request("POST", self._url(), json=data.to_payload())
        return _parse_device(self._json(r))

    def update(self, device_id: str, data: DeviceInput) -> Device:
        r = self._request("PUT", self._url(str(device_id)), json=data.to_payload())
        return _parse_device(self._json(r))

    def delete(self, device_id: str) -> None:
        # pas de corps requis au-delà du statut
        self._request("DELETE", self._url(str(device_id)))
