# src/portfolio/validation.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Mapping

from portfolio.models import Category, DeviceInput, parse_day


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    code: str      # required | not_a_number | negative | invalid_date | future_date | unknown_category
    message: str


class ValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(i.message for i in self.issues) or "Saisie invalide")


@dataclass(frozen=True)
class ValidationResult:
    value: DeviceInput | None = None
    errors: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors

    def unwrap(self) -> DeviceInput:
        if not self.ok:
            raise ValidationError(self.errors)
        return self.value


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate(raw: Mapping[str, Any] | DeviceInput, today: date | None = None) -> ValidationResult:
    """
    Contrôle une saisie avant tout appel réseau.
    Accepte les champs du formulaire (chaînes) ou un DeviceInput déjà validé
    (valider deux fois donne le même enregistrement).
    """
    if isinstance(raw, DeviceInput):
        raw = asdict(raw)

    today = today if today is not None else date.today()
    errors: list[ValidationIssue] = []

    name = _pick(raw, "name")
    if _is_blank(name):
        errors.append(ValidationIssue("name", "required", "Le nom est obligatoire."))
        name = None
    else:
        name = str(name).strip()

    price_raw = _pick(raw, "price")
    price: float | None = None
    if _is_blank(price_raw):
        errors.append(ValidationIssue("price", "required", "Le prix est obligatoire."))
    else:
        try:
            if isinstance(price_raw, bool):
                raise ValueError(price_raw)
            price = float(str(price_raw).strip()) if isinstance(price_raw, str) else float(price_raw)
            if not math.isfinite(price):
                raise ValueError(price_raw)
        except (TypeError, ValueError):
            errors.append(ValidationIssue("price", "not_a_number", f"Prix invalide: {price_raw!r}."))
            price = None
        else:
            if price < 0:
                errors.append(ValidationIssue("price", "negative", "Le prix doit être positif ou nul."))
                price = None

    date_raw = _pick(raw, "purchase_date", "purchaseDate")
    purchase: date | None = None
    if _is_blank(date_raw):
        errors.append(ValidationIssue("purchase_date", "required", "La date d'achat est obligatoire."))
    else:
        try:
            purchase = parse_day(date_raw)
        except (TypeError, ValueError):
            errors.append(ValidationIssue("purchase_date", "invalid_date", f"Date invalide: {date_raw!r}."))
        else:
            if purchase > today:
                errors.append(
                    ValidationIssue("purchase_date", "future_date", "La date d'achat ne peut pas être dans le futur.")
                )
                purchase = None

    cat_raw = _pick(raw, "category", "iconType")
    category = Category.OTHER
    if not _is_blank(cat_raw):
        try:
            category = Category.parse(cat_raw)
        except ValueError:
            errors.append(ValidationIssue("category", "unknown_category", f"Catégorie inconnue: {cat_raw!r}."))

    if errors:
        return ValidationResult(value=None, errors=errors)
    return ValidationResult(
        value=DeviceInput(name=name, price=price, purchase_date=purchase, category=category),
        errors=[],
    )
