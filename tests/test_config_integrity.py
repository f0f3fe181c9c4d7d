"""Tests for JSON configuration integrity.

Tests cover:
1. JSON file syntax and loader behaviour
2. Cascade order against the variant registry
3. Per-variant rule blocks (labels, required fields, metadata patterns)
"""

from __future__ import annotations

import re

import pytest

from statement_recon import config as config_module
from statement_recon.config import (
    CONFIG_DIR,
    get_cascade_order,
    get_config,
    get_error_messages,
    get_text_extraction_config,
    get_variant_spec,
    get_variant_specs,
)
from statement_recon.variants import VARIANT_REGISTRY

RULE_KEYS = {"contains", "equals", "excludes"}

# =============================================================================
# JSON Syntax and Loading Tests
# =============================================================================


class TestJsonSyntax:
    """Tests that all JSON config files are syntactically valid."""

    def test_config_json_loads(self) -> None:
        """config.json should be valid JSON and loadable."""
        config = get_config()
        assert isinstance(config, dict)
        assert len(config) > 0

    def test_variants_json_loads(self) -> None:
        """variants.json should declare the cascade and every variant."""
        specs = get_variant_specs()
        assert {"cascade_order", "generic_code_label", "variants"} <= set(specs)

    def test_all_root_json_files_exist(self) -> None:
        """All expected root JSON config files should exist."""
        for filename in ["config.json", "variants.json"]:
            assert (CONFIG_DIR / filename).exists(), f"Missing config file: {filename}"

    def test_missing_file_raises(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        """Loaders report the missing path."""
        monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path)
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            config_module._load_json("config.json")

    def test_error_messages_complete(self) -> None:
        """Every per-sheet error kind has a message."""
        assert set(get_error_messages()) >= {"empty_sheet", "no_header", "no_codes", "unreadable"}


# =============================================================================
# Cascade Tests
# =============================================================================


class TestCascadeConfig:
    """Tests that the cascade order matches the registered variants."""

    def test_order_covers_registry(self) -> None:
        """Every registered variant is in the cascade exactly once."""
        order = get_cascade_order()
        assert sorted(order) == sorted(VARIANT_REGISTRY)
        assert len(order) == len(set(order))

    def test_fallback_last(self) -> None:
        """The fallback variant closes the cascade and is the only fallback."""
        order = get_cascade_order()
        fallbacks = [key for key in order if get_variant_spec(key).get("fallback")]
        assert fallbacks == [order[-1]]

    def test_unknown_variant(self) -> None:
        with pytest.raises(KeyError, match="Unknown variant"):
            get_variant_spec("nope")


# =============================================================================
# Variant Rule Tests
# =============================================================================


@pytest.mark.parametrize("key", sorted(VARIANT_REGISTRY))
class TestVariantSpec:
    """Per-variant rule block checks."""

    def test_institution(self, key: str) -> None:
        assert get_variant_spec(key)["institution"]

    def test_label_rules_shape(self, key: str) -> None:
        """Label rules only use known keys."""
        spec = get_variant_spec(key)
        rules = [rule for field_rules in spec.get("labels", {}).values() for rule in field_rules]
        rules += list(spec.get("generic_code_labels") or [])
        for rule in rules:
            assert set(rule) <= RULE_KEYS, rule

    def test_required_fields_resolvable(self, key: str) -> None:
        """Every required field has label rules (or a generic code label)."""
        spec = get_variant_spec(key)
        resolvable = set(spec.get("labels", {}))
        if spec.get("generic_code_labels"):
            resolvable.add("code")
        assert set(spec["required_fields"]) <= resolvable

    def test_period_patterns(self, key: str) -> None:
        """Period patterns compile and capture the date."""
        for rule in get_variant_spec(key).get("metadata", {}).get("period_rules", []):
            assert re.compile(rule["pattern"]).groups >= 1
            assert rule["keywords"]


class TestPatterns:
    """Tests for shared regex settings."""

    def test_fallback_description_pattern(self) -> None:
        assert "{code}" in get_variant_spec("agribank")["description_pattern"]

    def test_text_patterns_compile(self) -> None:
        cfg = get_text_extraction_config()
        assert re.compile(cfg["amount_pattern"]).groups == 1
        re.compile(cfg["description_pattern"])
        re.compile(cfg["block_marker"])
