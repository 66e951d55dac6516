"""
Tests for config submission validation and normalization.
"""

import pytest

from db import ConfigStore, ConfigValidationError, normalize_config
from db.store import normalize_tiers, normalize_threshold


class TestValidation:
    """Malformed submissions are rejected without touching the store."""

    @pytest.mark.parametrize("payload", [
        None,
        [],
        "u1",
        {"assets": []},
        {"userId": "", "assets": []},
        {"userId": "u1"},
        {"userId": "u1", "assets": {"symbol": "XRP"}},
        {"userId": "u1", "assets": "XRP"},
    ])
    def test_rejects_malformed_payload(self, payload):
        """Missing userId or non-array assets is a validation error."""
        with pytest.raises(ConfigValidationError):
            normalize_config(payload)

    def test_rejection_keeps_previous_config(self):
        """A bad submission leaves the stored config for that user alone."""
        store = ConfigStore()
        store.set_config({"userId": "u1", "assets": [{"symbol": "XRP", "tier1": 0.5}]})

        with pytest.raises(ConfigValidationError):
            store.set_config({"userId": "u1", "assets": "nope"})

        cfg = store.get_config("u1")
        assert [a.symbol for a in cfg.assets] == ["XRP"]
        assert store.count() == 1

    def test_error_message_names_field(self):
        """The reason is descriptive enough to surface to the client."""
        with pytest.raises(ConfigValidationError, match="userId"):
            normalize_config({"assets": []})
        with pytest.raises(ConfigValidationError, match="assets"):
            normalize_config({"userId": "u1", "assets": None})


class TestReplacement:
    def test_second_submission_replaces_assets(self):
        """Assets are replaced wholesale, never merged."""
        store = ConfigStore()
        store.set_config({"userId": "u1", "assets": [{"symbol": "XRP", "tier1": 0.5}]})
        store.set_config({"userId": "u1", "assets": [{"symbol": "HBAR", "tier1": 0.1}]})

        cfg = store.get_config("u1")
        assert [a.symbol for a in cfg.assets] == ["HBAR"]
        assert cfg.assets[0].tiers_usd == [0.1]

    def test_users_are_independent(self):
        store = ConfigStore()
        store.set_config({"userId": "u1", "assets": []})
        store.set_config({"userId": "u2", "assets": [{"symbol": "xrp", "tier1": 1}]})

        assert store.count() == 2
        assert store.get_config("u1").assets == []
        assert store.get_config("missing") is None

    def test_snapshot_is_a_copy(self):
        """Later submissions do not change a snapshot already taken."""
        store = ConfigStore()
        store.set_config({"userId": "u1", "assets": []})
        snap = store.snapshot()
        store.set_config({"userId": "u2", "assets": []})

        assert [c.user_id for c in snap] == ["u1"]
        assert len(store.snapshot()) == 2


class TestNormalization:
    def test_named_tiers_drop_non_positive(self):
        """tier1..tier3 are combined in order; zero and negatives are dropped."""
        assert normalize_tiers({"tier1": 5, "tier2": 0, "tier3": -1}) == [5.0]

    def test_explicit_list_preferred(self):
        raw = {"tiersUSD": [1, 2, 3], "tier1": 9}
        assert normalize_tiers(raw) == [1.0, 2.0, 3.0]

    def test_empty_explicit_list_falls_back(self):
        raw = {"tiersUSD": [], "tier1": 0.5, "tier2": 0.6}
        assert normalize_tiers(raw) == [0.5, 0.6]

    def test_non_finite_and_junk_tiers_dropped(self):
        raw = {"tiersUSD": [float("nan"), float("inf"), "abc", None, True, "2.5", 3]}
        assert normalize_tiers(raw) == [2.5, 3.0]

    def test_threshold_default(self):
        """No thresholdPct and no alertWithinPct means 5 percent."""
        assert normalize_threshold({}) == 5.0

    def test_threshold_non_positive_defaults(self):
        assert normalize_threshold({"thresholdPct": 0}) == 5.0
        assert normalize_threshold({"thresholdPct": -3}) == 5.0

    def test_legacy_threshold_alias(self):
        assert normalize_threshold({"alertWithinPct": 2}) == 2.0
        assert normalize_threshold({"thresholdPct": 3, "alertWithinPct": 2}) == 3.0

    def test_legacy_payload_shape(self):
        cfg = normalize_config({
            "userId": "u1",
            "assets": [{"symbol": "xrp", "alertWithinPct": 3, "tiersUSD": [0.5, 0.75]}]
        })

        asset = cfg.assets[0]
        assert asset.symbol == "XRP"
        assert asset.threshold_pct == 3.0
        assert asset.tiers_usd == [0.5, 0.75]

    def test_canonical_payload_shape(self):
        cfg = normalize_config({
            "userId": "u1",
            "currency": "EUR",
            "assets": [{"symbol": "hbar", "tier1": 0.1, "tier2": 0.2, "tier3": 0.3, "thresholdPct": 4}]
        })

        assert cfg.currency == "EUR"
        assert cfg.assets[0].symbol == "HBAR"
        assert cfg.assets[0].tiers_usd == [0.1, 0.2, 0.3]
        assert cfg.assets[0].threshold_pct == 4.0

    def test_empty_symbol_permitted(self):
        """An empty symbol is stored but never contributes a symbol to scan."""
        cfg = normalize_config({"userId": "u1", "assets": [{"tier1": 1}]})

        assert cfg.assets[0].symbol == ""
        assert cfg.symbols() == []
