"""Unit tests for the promotion config loader and registry."""

import json
import logging

import pytest
from datetime import date

from promotions.core.amount import Amount
from promotions.core.config_loader import load_all_promotion_configs, load_promotion_config
from promotions.core.order import Order, OrderItem
from promotions.core.promotion import Promotion
from promotions.core.promotion_registry import (
    PromotionRegistry,
    PromotionRegistryError,
    get_promotion_registry,
    initialize_promotion_registry,
    reset_promotion_registry,
)


def _definition(promotion_id: str, **overrides) -> dict:
    data = {
        "id": promotion_id,
        "name": promotion_id.replace("_", " ").title(),
        "conditions": [
            {
                "plugin": "order_item_quantity",
                "configuration": {"operator": ">", "quantity": 1},
            }
        ],
        "condition_operator": "AND",
    }
    data.update(overrides)
    return data


def _write(directory, name: str, content) -> None:
    path = directory / name
    if isinstance(content, str):
        path.write_text(content, encoding="utf-8")
    else:
        path.write_text(json.dumps(content), encoding="utf-8")


# ============================================================================
# Config loader
# ============================================================================

class TestConfigLoader:
    """Tests for loading promotion definitions from JSON."""

    def test_single_object(self, tmp_path):
        _write(tmp_path, "one.json", _definition("one"))
        assert [d["id"] for d in load_promotion_config(tmp_path / "one.json")] == ["one"]

    def test_list_of_objects(self, tmp_path):
        _write(tmp_path, "many.json", [_definition("a"), _definition("b")])
        assert [d["id"] for d in load_promotion_config(tmp_path / "many.json")] == ["a", "b"]

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_promotion_config(tmp_path / "nope.json") == []
        assert "not found" in caplog.text

    def test_invalid_json_is_skipped(self, tmp_path, caplog):
        _write(tmp_path, "broken.json", "{not json")
        _write(tmp_path, "good.json", _definition("good"))

        with caplog.at_level(logging.ERROR):
            definitions = load_all_promotion_configs(tmp_path)

        assert [d["id"] for d in definitions] == ["good"]
        assert "Invalid JSON" in caplog.text

    def test_files_loaded_in_name_order(self, tmp_path):
        _write(tmp_path, "b.json", _definition("second"))
        _write(tmp_path, "a.json", _definition("first"))
        _write(tmp_path, "notes.txt", "ignored")

        assert [d["id"] for d in load_all_promotion_configs(tmp_path)] == ["first", "second"]

    def test_missing_directory(self, tmp_path):
        assert load_all_promotion_configs(tmp_path / "missing") == []


# ============================================================================
# Registry
# ============================================================================

class TestPromotionRegistry:
    """Tests for PromotionRegistry."""

    def test_initialize(self, tmp_path):
        _write(tmp_path, "a.json", _definition("alpha"))
        _write(tmp_path, "b.json", [_definition("beta"), _definition("gamma")])

        registry = PromotionRegistry(tmp_path)
        registry.initialize()

        assert registry.is_initialized
        assert [p.promotion_id for p in registry.list_promotions()] == ["alpha", "beta", "gamma"]
        assert isinstance(registry.get_promotion("beta"), Promotion)
        assert registry.get_promotion("delta") is None

    def test_duplicate_ids_fail(self, tmp_path):
        _write(tmp_path, "a.json", _definition("alpha"))
        _write(tmp_path, "b.json", _definition("alpha"))

        registry = PromotionRegistry(tmp_path)
        with pytest.raises(PromotionRegistryError) as exc_info:
            registry.initialize()
        assert "Duplicate promotion id: alpha" in str(exc_info.value)
        assert not registry.is_initialized

    def test_invalid_definition_fails(self, tmp_path, caplog):
        bad = _definition("bad", conditions=[
            {"plugin": "order_item_quantity", "configuration": {"operator": "~", "quantity": 1}},
        ])
        _write(tmp_path, "bad.json", bad)

        registry = PromotionRegistry(tmp_path)
        with caplog.at_level(logging.ERROR), pytest.raises(PromotionRegistryError):
            registry.initialize()
        assert "Promotion 'bad'" in caplog.text

    @pytest.mark.parametrize(
        "overrides",
        [{"status": "false"}, {"stores": 42}, {"order_types": "default"}],
    )
    def test_malformed_filters_fail_validation(self, tmp_path, overrides):
        _write(tmp_path, "bad.json", _definition("bad", **overrides))

        registry = PromotionRegistry(tmp_path)
        with pytest.raises(PromotionRegistryError):
            registry.initialize()

    def test_reload_picks_up_changes(self, tmp_path):
        _write(tmp_path, "a.json", _definition("alpha"))
        registry = PromotionRegistry(tmp_path)
        registry.initialize()

        _write(tmp_path, "b.json", _definition("beta"))
        registry.reload()

        assert registry.get_promotion("beta") is not None

    def test_register(self, tmp_path):
        registry = PromotionRegistry(tmp_path)
        registry.initialize()

        registry.register(Promotion(promotion_id="code", name="In code"))
        assert registry.get_promotion("code") is not None

        with pytest.raises(PromotionRegistryError):
            registry.register(Promotion(promotion_id="code", name="Again"))

    def test_applicable_promotions(self, tmp_path):
        _write(tmp_path, "promotions.json", [
            _definition("any_multiple"),
            _definition("disabled", status=False),
            _definition("expired", end_date="2020-01-01"),
            _definition("big_orders", conditions=[{
                "plugin": "order_total_price",
                "configuration": {
                    "operator": ">=",
                    "amount": {"number": "100.00", "currency_code": "USD"},
                },
            }]),
        ])
        registry = PromotionRegistry(tmp_path)
        registry.initialize()

        order = Order(items=[OrderItem(quantity=2, unit_price=Amount("10.00", "USD"))])
        applicable = registry.applicable_promotions(order, today=date(2025, 6, 1))

        assert [p.promotion_id for p in applicable] == ["any_multiple"]


class TestRegistrySingleton:
    """Tests for the module-level registry helpers."""

    def test_initialize_and_reset(self, tmp_path):
        _write(tmp_path, "a.json", _definition("alpha"))

        registry = initialize_promotion_registry(tmp_path)
        assert get_promotion_registry() is registry

        reset_promotion_registry()
        assert get_promotion_registry() is not registry
        reset_promotion_registry()

    def test_packaged_definitions_load(self, initialized_registry):
        ids = [p.promotion_id for p in initialized_registry.list_promotions()]
        assert ids == ["bulk_buyer", "small_or_large_orders", "spring_clearance"]
