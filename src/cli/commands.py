# src/cli/commands.py
from __future__ import annotations

import argparse
import json

import pandas as pd
from dotenv import load_dotenv

from app.engine import Mutation, SyncEngine
from portfolio.display import format_currency, format_daily
from portfolio.models import Category, DeviceInput
from portfolio.ranking import SortDirection, SortKey
from portfolio.summary import summarize
from remote.store_api import StoreClient
from storage.db import connect, init_db
from storage.repo import get_events, journal_for
from ui.queries import category_frame, devices_frame, top_daily_cost_frame
from ui.snapshot import save_snapshot
from utils.logging import configure_logging


def _engine(args: argparse.Namespace) -> SyncEngine:
    conn = connect()
    init_db(conn)
    engine = SyncEngine(StoreClient(base_url=args.api_url), journal=journal_for(conn))
    m = engine.load()
    if not m.ok:
        raise SystemExit(f"Chargement impossible: {m.error}")
    return engine


def _exit_on_failure(m: Mutation) -> None:
    if m.rejected:
        raise SystemExit("Saisie invalide:\n" + "\n".join(f"  - {i.field}: {i.message}" for i in m.issues))
    if not m.ok:
        raise SystemExit(f"Échec {m.kind.value}: {m.error}")


def cmd_list(args: argparse.Namespace) -> None:
    engine = _engine(args)
    df = devices_frame(engine.devices, key=args.sort, direction=args.direction)
    if df.empty:
        print("(vide)")
        return
    print(df.to_string(index=False))


def cmd_add(args: argparse.Namespace) -> None:
    engine = _engine(args)
    m = engine.create({
        "name": args.name,
        "price": args.price,
        "purchase_date": args.date,
        "category": args.category,
    })
    _exit_on_failure(m)
    print("OK ajout:", json.dumps(m.device.to_payload(), ensure_ascii=False))


def cmd_edit(args: argparse.Namespace) -> None:
    engine = _engine(args)
    current = engine.state.get(args.id)
    if current is None:
        raise SystemExit(f"Appareil introuvable: {args.id}")

    # remplacement complet : les champs absents reprennent la valeur actuelle
    base = DeviceInput.from_device(current)
    m = engine.update(args.id, {
        "name": args.name if args.name is not None else base.name,
        "price": args.price if args.price is not None else base.price,
        "purchase_date": args.date if args.date is not None else base.purchase_date,
        "category": args.category if args.category is not None else base.category,
    })
    _exit_on_failure(m)
    print("OK modification:", json.dumps(m.device.to_payload(), ensure_ascii=False))


def _ask(prompt: str) -> bool:
    return input(prompt).strip().lower() in ("o", "oui", "y", "yes")


def cmd_delete(args: argparse.Namespace) -> None:
    engine = _engine(args)

    def confirm(device) -> bool:
        return args.yes or _ask(f"Supprimer « {device.name} » ? [o/N] ")

    m = engine.delete(args.id, confirm=confirm)
    if m.aborted:
        print("Suppression annulée.")
        return
    _exit_on_failure(m)
    print("OK suppression:", args.id)


def cmd_summary(args: argparse.Namespace) -> None:
    engine = _engine(args)
    s = summarize(engine.devices)
    print(f"Appareils            : {s.device_count}")
    print(f"Total des actifs     : {format_currency(s.total_asset)}")
    print(f"Coût journalier total: {format_daily(s.total_daily_cost)}")
    cat = category_frame(engine.devices)
    if not cat.empty:
        print()
        print(cat.to_string(index=False))


def cmd_top(args: argparse.Namespace) -> None:
    engine = _engine(args)
    df = top_daily_cost_frame(engine.devices, n=args.n)
    if df.empty:
        print("(vide)")
        return
    print(df.to_string(index=False))


def cmd_events(args: argparse.Namespace) -> None:
    conn = connect()
    init_db(conn)
    df: pd.DataFrame = get_events(conn, limit=args.limit)
    if df.empty:
        print("(vide)")
        return
    print(df.to_string(index=False))


def cmd_snapshot(args: argparse.Namespace) -> None:
    engine = _engine(args)
    paths = save_snapshot(engine.devices, out_dir=args.out, top_n=args.n)
    print(f"OK snapshot: {paths.devices_csv} {paths.png}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="asset-tracker")
    p.add_argument("--api_url", type=str, default=None, help="URL du store (sinon ASSET_TRACKER_API_URL)")
    sub = p.add_subparsers(dest="cmd", required=True)

    categories = [c.value for c in Category]
    sort_keys = [k.value for k in SortKey]
    directions = [d.value for d in SortDirection]

    p_list = sub.add_parser("list")
    p_list.add_argument("--sort", type=str, choices=sort_keys, default="none")
    p_list.add_argument("--direction", type=str, choices=directions, default="desc")
    p_list.set_defaults(func=cmd_list)

    p_add = sub.add_parser("add")
    p_add.add_argument("--name", type=str, required=True)
    p_add.add_argument("--price", type=str, required=True)
    p_add.add_argument("--date", type=str, required=True, help="YYYY-MM-DD")
    p_add.add_argument("--category", type=str, choices=categories, default="other")
    p_add.set_defaults(func=cmd_add)

    p_edit = sub.add_parser("edit")
    p_edit.add_argument("id", type=str)
    p_edit.add_argument("--name", type=str, default=None)
    p_edit.add_argument("--price", type=str, default=None)
    p_edit.add_argument("--date", type=str, default=None)
    p_edit.add_argument("--category", type=str, choices=categories, default=None)
    p_edit.set_defaults(func=cmd_edit)

    p_del = sub.add_parser("delete")
    p_del.add_argument("id", type=str)
    p_del.add_argument("--yes", action="store_true", help="ne pas demander de confirmation")
    p_del.set_defaults(func=cmd_delete)

    p_sum = sub.add_parser("summary")
    p_sum.set_defaults(func=cmd_summary)

    p_top = sub.add_parser("top")
    p_top.add_argument("--n", type=int, default=5)
    p_top.set_defaults(func=cmd_top)

    p_ev = sub.add_parser("events")
    p_ev.add_argument("--limit", type=int, default=20)
    p_ev.set_defaults(func=cmd_events)

    p_snap = sub.add_parser("snapshot")
    p_snap.add_argument("--out", type=str, default="outputs")
    p_snap.add_argument("--n", type=int, default=5)
    p_snap.set_defaults(func=cmd_snapshot)

    return p


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)
