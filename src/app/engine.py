# src/app/engine.py

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from portfolio.models import Category, Device, DeviceInput
from portfolio.validation import ValidationIssue, validate
from remote.store_api import DeviceStore, SyncError
from utils.logging import log_event


Journal = Callable[[str, dict[str, Any]], None]
Confirm = Callable[[Device], bool]


class MutationKind(str, Enum):
    LOAD = "LOAD"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class MutationStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass
class Mutation:
    kind: MutationKind
    device_id: Optional[str] = None
    status: MutationStatus = MutationStatus.IDLE
    device: Optional[Device] = None       # enregistrement canonique renvoyé par le store
    error: Optional[str] = None
    issues: list[ValidationIssue] = field(default_factory=list)
    aborted: bool = False                 # confirmation refusée (pas une erreur)

    @property
    def ok(self) -> bool:
        return self.status is MutationStatus.COMMITTED

    @property
    def rejected(self) -> bool:
        return bool(self.issues)


@dataclass
class DeviceState:
    """
    Collection locale, seul propriétaire en mémoire des appareils connus.
    Chaque écriture remplace la liste (jamais modifiée sur place) et incrémente version.
    """
    devices: list[Device] = field(default_factory=list)
    version: int = 0

    def get(self, device_id: str) -> Optional[Device]:
        for d in self.devices:
            if d.id == device_id:
                return d
        return None

    def _commit(self, devices: list[Device]) -> None:
        self.devices = devices
        self.version += 1

    def replace_all(self, devices: list[Device]) -> None:
        self._commit(list(devices))

    def prepend(self, device: Device) -> None:
        self._commit([device] + [d for d in self.devices if d.id != device.id])

    def replace(self, device: Device) -> None:
        if self.get(device.id) is None:
            self.prepend(device)
            return
        self._commit([device if d.id == device.id else d for d in self.devices])

    def remove(self, device_id: str) -> None:
        self._commit([d for d in self.devices if d.id != device_id])


@dataclass
class FormState:
    name: str = ""
    price: str = ""
    purchase_date: str = ""
    category: str = Category.OTHER.value

    def reset(self) -> None:
        self.name, self.price, self.purchase_date = "", "", ""
        self.category = Category.OTHER.value

    def fill(self, device: Device) -> None:
        self.name = device.name
        self.price = f"{device.price:g}"
        self.purchase_date = device.purchase_date.isoformat()
        self.category = device.display_category.value

    def as_raw(self) -> dict[str, str]:
        return {
            "name": self.name,
            "price": self.price,
            "purchase_date": self.purchase_date,
            "category": self.category,
        }


class SyncEngine:
    """
    Seul chemin d'écriture de la collection locale.
    Idle -> Submitting -> {Committed, Failed} ; l'état local n'est modifié
    qu'après confirmation du store, jamais avant ; aucun retry automatique.
    """

    def __init__(
        self,
        store: DeviceStore,
        state: DeviceState | None = None,
        form: FormState | None = None,
        journal: Journal | None = None,
    ):
        self.store = store
        self.state = state or DeviceState()
        self.form = form or FormState()
        self.journal = journal
        self.in_flight: list[Mutation] = []

    @property
    def devices(self) -> list[Device]:
        return self.state.devices

    def _record(self, m: Mutation, **extra: Any) -> None:
        payload = {"status": m.status.value, "device_id": m.device_id, **extra}
        if m.error:
            payload["error"] = m.error
        if m.issues:
            payload["issues"] = [i.code for i in m.issues]
        level = logging.WARNING if m.status is MutationStatus.FAILED else logging.INFO
        log_event(f"SYNC_{m.kind.value}", level=level, **payload)
        if self.journal is not None and m.status in (MutationStatus.COMMITTED, MutationStatus.FAILED):
            # le journal est annexe : son échec ne change pas l'issue de la synchronisation
            try:
                self.journal(m.kind.value, payload)
            except sqlite3.Error as e:
                log_event("JOURNAL_ERROR", level=logging.ERROR, kind=m.kind.value, error=str(e))

    def _submit(self, m: Mutation, call: Callable[[], Any]) -> Any:
        m.status = MutationStatus.SUBMITTING
        self.in_flight.append(m)
        try:
            result = call()
        except SyncError as e:
            m.status = MutationStatus.FAILED
            m.error = str(e)
            return None
        finally:
            self.in_flight.remove(m)
        m.status = MutationStatus.COMMITTED
        return result

    def _validate(self, m: Mutation, raw: Mapping[str, Any] | DeviceInput, today: date | None) -> Optional[DeviceInput]:
        res = validate(raw, today=today)
        if not res.ok:
            m.issues = list(res.errors)
            self._record(m)
            return None
        return res.value

    def load(self) -> Mutation:
        """Chargement complet depuis le store (au démarrage)."""
        m = Mutation(kind=MutationKind.LOAD)
        devices = self._submit(m, self.store.list)
        if m.ok:
            self.state.replace_all(devices)
        self._record(m, count=len(self.state.devices))
        return m

    def create(self, raw: Mapping[str, Any] | DeviceInput | None = None, today: date | None = None) -> Mutation:
        """
        Crée à partir de `raw` (ou du formulaire). Pas d'insertion avant confirmation :
        l'enregistrement renvoyé par le store (avec son id) est placé en tête.
        """
        m = Mutation(kind=MutationKind.CREATE)
        data = self._validate(m, raw if raw is not None else self.form.as_raw(), today)
        if data is None:
            return m

        saved = self._submit(m, lambda: self.store.create(data))
        if m.ok:
            m.device = saved
            m.device_id = saved.id
            self.state.prepend(saved)
            self.form.reset()
        self._record(m, name=data.name)
        return m

    def update(self, device_id: str, raw: Mapping[str, Any] | DeviceInput, today: date | None = None) -> Mutation:
        """Remplacement complet de l'enregistrement `device_id`."""
        m = Mutation(kind=MutationKind.UPDATE, device_id=device_id)
        data = self._validate(m, raw, today)
        if data is None:
            return m

        def call() -> Device:
            out = self.store.update(device_id, data)
            if out.id != device_id:
                raise SyncError(f"Le store a renvoyé l'id {out.id!r} au lieu de {device_id!r}.")
            return out

        saved = self._submit(m, call)
        if m.ok:
            m.device = saved
            self.state.replace(saved)
        self._record(m)
        return m

    def delete(self, device_id: str, confirm: Confirm) -> Mutation:
        """Suppression après confirmation explicite ; retrait local seulement si le store accepte."""
        m = Mutation(kind=MutationKind.DELETE, device_id=device_id)
        target = self.state.get(device_id)
        if target is None:
            m.status = MutationStatus.FAILED
            m.error = f"Appareil inconnu: {device_id}"
            self._record(m)
            return m

        if not confirm(target):
            m.aborted = True
            return m

        self._submit(m, lambda: self.store.delete(device_id))
        if m.ok:
            m.device = target
            self.state.remove(device_id)
        self._record(m)
        return m
