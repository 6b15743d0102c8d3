# src/portfolio/models.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping


class Category(str, Enum):
    PHONE = "phone"
    LAPTOP = "laptop"
    WATCH = "watch"
    HEADPHONE = "headphone"
    TABLET = "tablet"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | Category) -> Category:
        """Tag exact -> membre, sinon ValueError."""
        if isinstance(value, Category):
            return value
        return cls(str(value).strip().lower())

    @classmethod
    def coerce(cls, value: str | Category | None) -> Category:
        # affichage uniquement : une valeur inconnue ne réécrit jamais la donnée stockée
        try:
            return cls.parse(value) if value is not None else cls.OTHER
        except ValueError:
            return cls.OTHER


def parse_day(value: Any) -> date:
    """date | datetime | 'YYYY-MM-DD' | 'YYYY-MM-DDTHH:MM[:SS...][Z]' -> date (heure ignorée)."""
    if isinstance(value, date):
        # datetime hérite de date : on retire l'heure
        return value if type(value) is date else value.date()
    text = str(value).strip()
    if not text:
        raise ValueError("date vide")
    if len(text) == 10:
        return date.fromisoformat(text)
    # horodatage complet uniquement ; tout autre suffixe est une date invalide
    if len(text) < 16 or text[10] not in ("T", " "):
        raise ValueError(f"Date invalide: {text!r}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


@dataclass(frozen=True)
class Device:
    id: str
    name: str
    price: float
    purchase_date: date
    category: str  # tag brut tel que stocké

    @property
    def display_category(self) -> Category:
        return Category.coerce(self.category)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> Device:
        """
        Enregistre renvoyé par le store -> Device.
        Le store d'origine nomme la catégorie 'iconType'; 'category' est accepté aussi.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Enregistrement inattendu: {data!r}")
        missing = [k for k in ("id", "name", "price", "purchaseDate") if k not in data]
        if missing:
            raise ValueError(f"Champs manquants: {missing}")

        price = float(data["price"])
        if not math.isfinite(price):
            raise ValueError(f"Prix non fini: {data['price']!r}")

        category = data.get("iconType", data.get("category", Category.OTHER.value))
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            price=price,
            purchase_date=parse_day(data["purchaseDate"]),
            category=str(category),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "purchaseDate": self.purchase_date.isoformat(),
            "iconType": self.category,
        }


@dataclass(frozen=True)
class DeviceInput:
    """Enregistrement validé, sans id (création ou remplacement complet)."""
    name: str
    price: float
    purchase_date: date
    category: Category = Category.OTHER

    @classmethod
    def from_device(cls, device: Device) -> DeviceInput:
        return cls(
            name=device.name,
            price=float(device.price),
            purchase_date=device.purchase_date,
            category=device.display_category,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "price": float(self.price),
            "purchaseDate": self.purchase_date.isoformat(),
            "iconType": self.category.value,
        }
