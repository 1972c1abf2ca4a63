"""
tests/unit/test_bootstrap.py - Bootstrap layer tests

Configuration loading, application context wiring, and the CLI.
"""

import json
import logging

import pytest

from treeshop.bootstrap import AppContext, TreeShopConfig, cli_main, load_config, setup_logging
from treeshop.directory import InMemoryPersistence, JsonFilePersistence
from treeshop.pricing import ServiceType


# =============================================================================
# CONFIG TESTS
# =============================================================================

class TestConfig:
    """Test configuration loading."""

    def test_defaults(self):
        config = TreeShopConfig()
        assert config.pricing.default_markup == 3.0
        assert config.pricing.validity_days == 7
        assert config.storage.backend == "json"
        assert config.cache.loadout_ttl_seconds == 60.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TREESHOP_FUEL_PRICE", "5.10")
        monkeypatch.setenv("TREESHOP_VALIDITY_DAYS", "14")
        monkeypatch.setenv("TREESHOP_CACHE_ENABLED", "false")
        monkeypatch.setenv("TREESHOP_RATE_OVERRIDES", '{"tree_removal": {"minimum": 900}}')

        config = TreeShopConfig.from_env()

        assert config.pricing.fuel_price_per_gallon == 5.10
        assert config.pricing.validity_days == 14
        assert config.cache.enabled is False
        assert config.pricing.rate_overrides == {"tree_removal": {"minimum": 900}}

    def test_from_file_overlays_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TREESHOP_LABOR_RATE", "40")
        path = tmp_path / "treeshop.json"
        path.write_text(json.dumps({
            "environment": "production",
            "pricing": {"default_markup": 2.5},
            "storage": {"backend": "memory"},
        }))

        config = TreeShopConfig.from_file(str(path))

        assert config.environment == "production"
        assert config.pricing.default_markup == 2.5
        assert config.pricing.labor_rate == 40.0
        assert config.storage.backend == "memory"

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "treeshop.json"
        path.write_text(json.dumps({"pricing": {"no_such_key": 1}}))
        config = TreeShopConfig.from_file(str(path))
        assert not hasattr(config.pricing, "no_such_key")

    def test_missing_file_falls_back(self, tmp_path):
        config = TreeShopConfig.from_file(str(tmp_path / "absent.json"))
        assert config.environment == "development"

    def test_load_config_finds_local_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "treeshop.json").write_text(json.dumps({"environment": "staging"}))
        assert load_config().environment == "staging"

    def test_to_dict(self):
        d = TreeShopConfig().to_dict()
        assert d["pricing"]["default_markup"] == 3.0
        assert d["storage"]["backend"] == "json"


# =============================================================================
# APP CONTEXT TESTS
# =============================================================================

class TestAppContext:
    """Test application context wiring."""

    def test_build_seeds_sample_data(self, memory_config):
        ctx = AppContext.build(memory_config)
        assert len(ctx.equipment) == 9
        assert len(ctx.employees) == 8
        assert len(ctx.loadouts) == 2
        assert isinstance(ctx.persistence, InMemoryPersistence)

    def test_build_without_seed(self, memory_config):
        memory_config.storage.seed_sample_data = False
        ctx = AppContext.build(memory_config)
        assert len(ctx.equipment) == 0
        assert len(ctx.loadouts) == 0

    def test_seed_runs_once(self, memory_config):
        persistence = InMemoryPersistence()
        AppContext.build(memory_config, persistence)
        again = AppContext.build(memory_config, persistence)
        assert len(again.equipment) == 9

    def test_json_backend(self, memory_config, tmp_path):
        memory_config.storage.backend = "json"
        memory_config.storage.data_dir = str(tmp_path / "records")
        ctx = AppContext.build(memory_config)
        assert isinstance(ctx.persistence, JsonFilePersistence)
        assert (tmp_path / "records" / "equipment.json").exists()

    def test_rate_overrides_applied(self, memory_config):
        memory_config.pricing.rate_overrides = {"health_assessment": {"base_rate": 175.0}}
        ctx = AppContext.build(memory_config)
        assert ctx.pricer.rate_table.get(ServiceType.HEALTH_ASSESSMENT).base_rate == 175.0

    def test_number_timezone_from_env(self, monkeypatch, memory_config):
        monkeypatch.setenv("TREESHOP_NUMBER_TIMEZONE", "America/New_York")
        ctx = AppContext.build(TreeShopConfig.from_env())
        assert ctx.assembler.number_timezone.key == "America/New_York"

    def test_number_timezone_defaults_to_clock_zone(self, memory_config):
        assert AppContext.build(memory_config).assembler.number_timezone is None

    def test_loadout_cost_uses_cache(self, memory_config):
        ctx = AppContext.build(memory_config)
        loadout = ctx.loadouts.all()[0]
        first = ctx.loadout_cost(loadout)
        assert ctx.loadout_cost(loadout) is first
        assert ctx.loadout_cache.hits == 1

    def test_cache_disabled(self, memory_config):
        memory_config.cache.enabled = False
        ctx = AppContext.build(memory_config)
        assert ctx.loadout_cache is None
        loadout = ctx.loadouts.all()[0]
        assert ctx.loadout_cost(loadout).total_cost > 0

    def test_summary(self, memory_config):
        summary = AppContext.build(memory_config).summary()
        assert summary["equipment"] == 9
        assert summary["proposals"] == 0


# =============================================================================
# CLI TESTS
# =============================================================================

class TestCLI:
    """Test CLI commands."""

    def test_no_command(self, memory_config, capsys):
        assert cli_main([]) == 2

    def test_equipment_rate_for_category(self, memory_config, capsys):
        assert cli_main(["--json", "equipment-rate", "--category", "chipper"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["hourly_rate"] == 28.25

    def test_equipment_rate_all(self, memory_config, capsys):
        assert cli_main(["equipment-rate"]) == 0
        out = capsys.readouterr().out
        assert "Bandit Chipper #1" in out
        assert "/hr" in out

    def test_equipment_rate_unknown_id(self, memory_config, capsys):
        assert cli_main(["equipment-rate", "--id", "nope"]) == 1

    def test_loadout_cost(self, memory_config, capsys):
        assert cli_main(["--json", "loadout-cost", "--markup", "2"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data) == 2
        for row in data:
            assert row["billable_rate"] == pytest.approx(row["total_cost"] * 2, abs=0.02)

    def test_quote(self, memory_config, capsys):
        assert cli_main([
            "--json", "quote", "stump_grinding", "--stump-diameter", "48", "--factor", "Steep Slope",
        ]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["unit_price"] == pytest.approx(204.96)
        assert data["afiss_factors"] == ["Steep Slope"]

    def test_quote_unknown_factor(self, memory_config, capsys):
        assert cli_main(["quote", "tree_removal", "--factor", "Lava Flow"]) == 1
        assert "Unknown AFISS factor" in capsys.readouterr().err

    def test_quote_unknown_service(self, memory_config):
        with pytest.raises(SystemExit) as exc:
            cli_main(["quote", "volcano_removal"])
        assert exc.value.code == 2

    def test_proposals_stats(self, memory_config, capsys):
        assert cli_main(["--json", "proposals-stats"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["total_count"] == 0
        assert data["conversion_rate"] == 0.0


# =============================================================================
# LOGGING TESTS
# =============================================================================

@pytest.fixture
def root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)


class TestLogging:
    """Test logging setup."""

    def test_repeated_setup_does_not_stack_handlers(self, root_handlers):
        setup_logging("INFO")
        count = len(root_handlers.handlers)
        setup_logging("DEBUG")
        setup_logging("WARNING")
        assert len(root_handlers.handlers) == count
        assert root_handlers.level == logging.WARNING

    def test_file_handler_replaced(self, root_handlers, tmp_path):
        setup_logging("INFO", log_file=str(tmp_path / "a.log"))
        setup_logging("INFO")
        files = [h for h in root_handlers.handlers if isinstance(h, logging.FileHandler)]
        assert files == []

    def test_repeated_cli_runs(self, memory_config, root_handlers, capsys):
        cli_main(["proposals-stats"])
        count = len(root_handlers.handlers)
        cli_main(["proposals-stats"])
        cli_main(["proposals-stats"])
        assert len(root_handlers.handlers) == count
