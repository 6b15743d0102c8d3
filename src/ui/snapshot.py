# src/ui/snapshot.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Iterable

import matplotlib
matplotlib.use("Agg")  # export fichier uniquement, pas de fenêtre
import matplotlib.pyplot as plt

from portfolio.models import Device
from ui.queries import devices_frame, top_daily_cost_frame


@dataclass(frozen=True)
class SnapshotPaths:
    devices_csv: Path
    png: Path


def _now_stamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def save_snapshot(
    devices: Iterable[Device],
    out_dir: str | Path = "outputs",
    top_n: int = 5,
    today: date | None = None,
) -> SnapshotPaths:
    """Exporte la table des appareils (CSV) et le top coût journalier (PNG)."""
    devices = list(devices)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    stamp = _now_stamp()

    df = devices_frame(devices, today=today)
    top = top_daily_cost_frame(devices, n=top_n, today=today)

    devices_csv = out / f"devices_{stamp}.csv"
    png = out / f"top_daily_cost_{stamp}.png"

    df.to_csv(devices_csv, index=False)

    fig, ax = plt.subplots()
    if len(top) > 0:
        # barres horizontales, le plus cher en haut
        ax.barh(top["label"][::-1], top["value"][::-1])
        ax.set_title(f"Top {top_n} — coût journalier")
        ax.set_xlabel("Coût / jour")
    else:
        # crée quand même un png vide pour cohérence
        ax.set_title("Top coût journalier (vide)")
    fig.tight_layout()
    fig.savefig(png, dpi=160)
    plt.close(fig)

    return SnapshotPaths(devices_csv=devices_csv, png=png)
