from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from app.engine import Mutation, MutationKind, SyncEngine


_VERBS = {
    MutationKind.LOAD: "Chargement",
    MutationKind.CREATE: "Ajout",
    MutationKind.UPDATE: "Modification",
    MutationKind.DELETE: "Suppression",
}


@dataclass
class ActionResult:
    ok: bool
    message: str
    aborted: bool = False
    fields: tuple[str, ...] = ()   # champs du formulaire en erreur


def to_result(m: Mutation) -> ActionResult:
    verb = _VERBS[m.kind]
    if m.aborted:
        return ActionResult(ok=False, message=f"{verb} annulé(e).", aborted=True)
    if m.rejected:
        return ActionResult(
            ok=False,
            message="Veuillez corriger la saisie : " + " ".join(i.message for i in m.issues),
            fields=tuple(i.field for i in m.issues),
        )
    if not m.ok:
        return ActionResult(ok=False, message=f"{verb} en erreur : {m.error}")
    name = m.device.name if m.device is not None else ""
    return ActionResult(ok=True, message=f"{verb} OK {name}".rstrip())


def add_device(engine: SyncEngine, values: Mapping[str, Any]) -> ActionResult:
    return to_result(engine.create(values))


def edit_device(engine: SyncEngine, device_id: str, values: Mapping[str, Any]) -> ActionResult:
    return to_result(engine.update(device_id, values))


def delete_device(engine: SyncEngine, device_id: str, confirmed: bool) -> ActionResult:
    return to_result(engine.delete(device_id, confirm=lambda _device: confirmed))


def flash_kind(res: ActionResult) -> str:
    # une confirmation refusée n'est pas une erreur
    if res.ok:
        return "success"
    return "info" if res.aborted else "error"
