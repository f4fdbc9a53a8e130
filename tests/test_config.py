"""
test_config.py — YAML analysis configuration.
"""

import pytest

from distribution_engine.config import (
    build_analysis_parameters,
    get_analysis_by_name,
    list_analyses,
    load_analysis_config,
)

CONFIG = """
defaults:
  bucketing: {nq: 4}
  report: {key: y}
analyses:
  - name: wealth
    description: Wealth distribution
    bucketing: {nq: 10, top_cuts: [0.9, 0.99]}
    report: {key: a, statistics: [quantile_shares, top_shares, gini]}
    mobility: {horizon: 5}
  - name: income
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "analysis.yaml"
    path.write_text(CONFIG)
    return path


def test_load_and_list(config_path):
    config = load_analysis_config(str(config_path))
    assert list_analyses(config) == [("wealth", "Wealth distribution"), ("income", "")]


def test_analysis_overrides_defaults(config_path):
    config = load_analysis_config(str(config_path))
    wealth = build_analysis_parameters(get_analysis_by_name(config, "wealth"), config["defaults"])
    assert wealth.nq == 10
    assert wealth.key == "a"
    assert wealth.top_cuts == (0.9, 0.99)
    assert wealth.statistics == ("quantile_shares", "top_shares", "gini")
    assert wealth.horizon == 5

    income = build_analysis_parameters(get_analysis_by_name(config, "income"), config["defaults"])
    assert income.nq == 4
    assert income.key == "y"


def test_unknown_field_warns():
    with pytest.warns(UserWarning, match="Unknown field 'deciles'"):
        params = build_analysis_parameters({"name": "x", "bucketing": {"deciles": True}})
    assert params.nq == 5


def test_missing_analysis_and_file(config_path, tmp_path):
    config = load_analysis_config(str(config_path))
    with pytest.raises(ValueError, match="not found"):
        get_analysis_by_name(config, "consumption")
    with pytest.raises(FileNotFoundError):
        load_analysis_config(str(tmp_path / "missing.yaml"))


def test_config_requires_analyses(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("defaults: {}\n")
    with pytest.raises(ValueError):
        load_analysis_config(str(path))
    path.write_text("analyses:\n  - description: no name\n")
    with pytest.raises(ValueError):
        load_analysis_config(str(path))
