"""Tests for SearchConfig and YAML search profiles."""

from __future__ import annotations

import os
import textwrap
from pathlib import Path
from unittest import mock

import pytest

from src.search.config import SearchConfig, load_search_config


class TestSearchConfig:
    """Defaults and validation."""

    def test_defaults(self):
        cfg = SearchConfig()
        assert cfg.budget == 200
        assert cfg.rotation_period == 15
        assert cfg.settle_s == 0.1
        assert cfg.stop_check_interval == 10
        assert cfg.continue_on_stop is True
        assert cfg.progress_log_interval == 25

    @pytest.mark.parametrize(
        "field, value",
        [
            ("budget", -1),
            ("rotation_period", 0),
            ("settle_s", -0.1),
            ("stop_check_interval", 0),
            ("progress_log_interval", -1),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValueError, match=field):
            SearchConfig(**{field: value})

    def test_zero_budget_allowed(self):
        assert SearchConfig(budget=0).budget == 0

    def test_from_dict_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown fields.*max_moves"):
            SearchConfig.from_dict({"max_moves": 10})

    def test_from_dict(self):
        cfg = SearchConfig.from_dict({"budget": 50, "continue_on_stop": False})
        assert cfg.budget == 50
        assert cfg.continue_on_stop is False

    def test_with_overrides_ignores_none(self):
        cfg = SearchConfig().with_overrides(budget=30, settle_s=None, continue_on_stop=None)
        assert cfg.budget == 30
        assert cfg.settle_s == 0.1
        assert cfg.continue_on_stop is True

    def test_with_overrides_returns_copy(self):
        base = SearchConfig()
        base.with_overrides(budget=1)
        assert base.budget == 200

    def test_with_overrides_validates(self):
        with pytest.raises(ValueError):
            SearchConfig().with_overrides(rotation_period=0)


class TestLoadSearchConfig:
    """YAML profiles under configs/search/."""

    def test_shipped_default(self):
        assert load_search_config("default") == SearchConfig()

    def test_shipped_quick(self):
        cfg = load_search_config("quick")
        assert cfg.budget == 50
        assert cfg.rotation_period == 15

    def test_missing_profile(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="nope"):
            load_search_config("nope", configs_dir=tmp_path)

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")
        assert load_search_config("empty", configs_dir=tmp_path) == SearchConfig()

    def test_non_mapping_rejected(self, tmp_path: Path):
        (tmp_path / "list.yaml").write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Expected a YAML mapping"):
            load_search_config("list", configs_dir=tmp_path)

    def test_unknown_field_rejected(self, tmp_path: Path):
        (tmp_path / "typo.yaml").write_text("budjet: 10\n", encoding="utf-8")
        with pytest.raises(ValueError, match="budjet"):
            load_search_config("typo", configs_dir=tmp_path)

    def test_env_expansion_coerces_types(self, tmp_path: Path):
        yaml_content = textwrap.dedent("""\
            budget: ${QA_BUDGET:-80}
            settle_s: $QA_SETTLE
            continue_on_stop: ${QA_CONTINUE:-true}
        """)
        (tmp_path / "env.yaml").write_text(yaml_content, encoding="utf-8")

        env = {k: v for k, v in os.environ.items() if k not in ("QA_BUDGET", "QA_CONTINUE")}
        env["QA_SETTLE"] = "0.25"
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = load_search_config("env", configs_dir=tmp_path)

        assert cfg.budget == 80
        assert cfg.settle_s == 0.25
        assert cfg.continue_on_stop is True

    def test_env_bool_false(self, tmp_path: Path):
        (tmp_path / "abort.yaml").write_text(
            "continue_on_stop: $QA_CONTINUE\n", encoding="utf-8"
        )
        with mock.patch.dict(os.environ, {"QA_CONTINUE": "no"}):
            cfg = load_search_config("abort", configs_dir=tmp_path)
        assert cfg.continue_on_stop is False
