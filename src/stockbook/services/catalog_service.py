from __future__ import annotations

from stockbook.domain.errors import DuplicateEntryError, NotFoundError, ValidationError
from stockbook.domain.models import Product
from stockbook.repositories.event_store import EventStore


class CatalogService:
    def __init__(self, repo: EventStore):
        self.repo = repo

    # ---------- Product list ----------
    def list_products(self, search: str = "") -> list[Product]:
        needle = search.lower()
        rows = [p for p in self.repo.load_products() if needle in p.name.lower()]
        return sorted(rows, key=lambda p: p.name.lower())

    def _clean(self, name: str, category: str, unit: str) -> Product:
        name = (name or "").strip()
        unit = (unit or "").strip()
        if not name or not unit:
            raise ValidationError("Product name and unit are required.")
        return Product(name=name, category=(category or "").strip(), unit=unit)

    def add_product(self, name: str, category: str, unit: str) -> Product:
        product = self._clean(name, category, unit)
        products = self.repo.load_products()
        if any(p.name.lower() == product.name.lower() for p in products):
            raise DuplicateEntryError("Product already exists.")
        self.repo.save_products(products + [product])
        return product

    def update_product(self, current_name: str, name: str, category: str, unit: str) -> Product:
        product = self._clean(name, category, unit)
        products = self.repo.load_products()
        idx = next((i for i, p in enumerate(products) if p.name == current_name), None)
        if idx is None:
            raise NotFoundError("Product not found.")
        if any(i != idx and p.name.lower() == product.name.lower() for i, p in enumerate(products)):
            raise DuplicateEntryError("Product already exists.")
        products[idx] = product
        self.repo.save_products(products)
        return product

    def delete_product(self, name: str) -> None:
        products = self.repo.load_products()
        remaining = [p for p in products if p.name != name]
        if len(remaining) == len(products):
            raise NotFoundError("Product not found.")
        self.repo.save_products(remaining)

    # ---------- Product options (stock entry picker) ----------
    def list_options(self) -> list[str]:
        return self.repo.load_product_options()

    def add_option(self, name: str) -> list[str]:
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError("Product name cannot be empty.")
        options = self.repo.load_product_options()
        if trimmed in options:
            raise DuplicateEntryError("Product already exists.")
        options.append(trimmed)
        self.repo.save_product_options(options)
        return options
