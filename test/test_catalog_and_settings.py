import pytest

from conftest import make_events

from stockbook.domain.errors import DuplicateEntryError, NotFoundError, ValidationError
from stockbook.domain.models import AppSettings
from stockbook.services.catalog_service import CatalogService
from stockbook.services.settings_service import SettingsService


def test_catalog_crud_and_case_insensitive_uniqueness():
    catalog = CatalogService(make_events())
    catalog.add_product("Turmeric", "Spices", "kg")
    catalog.add_product("chili powder", "Spices", "g")

    with pytest.raises(DuplicateEntryError):
        catalog.add_product("TURMERIC", "Spices", "kg")
    with pytest.raises(ValidationError, match="name and unit"):
        catalog.add_product("Cumin", "Spices", "")

    assert [p.name for p in catalog.list_products()] == ["chili powder", "Turmeric"]
    assert [p.name for p in catalog.list_products("TUR")] == ["Turmeric"]

    updated = catalog.update_product("Turmeric", "Turmeric", "Instant Mixes", "pack")
    assert updated.unit == "pack"
    with pytest.raises(DuplicateEntryError):
        catalog.update_product("Turmeric", "Chili Powder", "Spices", "kg")

    catalog.delete_product("Turmeric")
    with pytest.raises(NotFoundError):
        catalog.delete_product("Turmeric")
    assert [p.to_dict() for p in catalog.list_products()] == [
        {"name": "chili powder", "category": "Spices", "unit": "g"}
    ]


def test_product_options_are_trimmed_and_unique():
    catalog = CatalogService(make_events())
    assert catalog.add_option("  Chili ") == ["Chili"]

    with pytest.raises(DuplicateEntryError):
        catalog.add_option("Chili")
    with pytest.raises(ValidationError):
        catalog.add_option("   ")
    assert catalog.list_options() == ["Chili"]


def test_settings_defaults_save_toggle_reset():
    settings = SettingsService(make_events())

    current, updated = settings.load()
    assert current == AppSettings()
    assert updated is None

    stamp = settings.save(currency="$ USD")
    current, updated = settings.load()
    assert current.currency == "$ USD"
    assert current.default_unit == "kg"
    assert updated == stamp

    toggled = settings.toggle_access("reports")
    assert toggled.admin_access == {"reports": False, "analytics": True, "productManagement": True}

    with pytest.raises(ValidationError):
        settings.save(currency="GBP")
    with pytest.raises(ValidationError):
        settings.toggle_access("billing")

    assert settings.reset() == AppSettings()
    assert settings.load() == (AppSettings(), None)


def test_settings_serialize_with_stored_key_names():
    events = make_events()
    SettingsService(events).save(default_unit="box")
    raw = events.store.get("app_settings")
    assert raw == {
        "currency": "₹ INR",
        "defaultUnit": "box",
        "adminAccess": {"reports": True, "analytics": True, "productManagement": True},
    }
