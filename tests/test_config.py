import json
from pathlib import Path

import pytest

from rhjobs.config import ConfigError, coerce_bool, coerce_positive_int, load_settings, proxy_url


@pytest.mark.parametrize(
    "value,expected",
    [(None, 100), ("lots", 100), ("0", 1), (-3, 1), (5.7, 5), ("25", 25), (True, 100), (float("nan"), 100)],
)
def test_coerce_positive_int(value, expected):
    assert coerce_positive_int(value, 100) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(None, True), (False, False), ("false", False), ("YES", True), ("0", False), ("maybe", True)],
)
def test_coerce_bool(value, expected):
    assert coerce_bool(value, True) is expected


def test_proxy_url_shapes():
    assert proxy_url("http://p:8000") == "http://p:8000"
    assert proxy_url({"proxyUrls": ["http://a:1", "http://b:2"]}) == "http://a:1"
    assert proxy_url({"useApifyProxy": True}) is None
    assert proxy_url(None) is None


def test_defaults():
    settings = load_settings(environ={})
    assert settings.query.remote == "Any"
    assert settings.query.keyword == ""
    assert settings.budget.results_wanted == 100
    assert settings.budget.max_pages == 20
    assert settings.budget.page_size == 25
    assert settings.collect_details is True
    assert settings.proxy is None
    assert settings.output_dir == Path("storage")


def test_input_file_over_env_and_cli_over_file(tmp_path):
    input_path = tmp_path / "INPUT.json"
    input_path.write_text(json.dumps({
        "keyword": "accountant",
        "jobType": "Temporary",
        "results_wanted": "lots",
        "max_pages": 3,
        "collectDetails": False,
        "proxyConfiguration": {"proxyUrls": ["http://proxy:8000"]},
    }))
    environ = {"RH_KEYWORD": "ignored", "RH_LOCATION": "Denver, CO", "RH_OUTPUT_DIR": str(tmp_path)}

    settings = load_settings(input_path, {"max_pages": "7", "keyword": None}, environ=environ)

    assert settings.query.keyword == "accountant"
    assert settings.query.location == "Denver, CO"
    assert settings.query.job_type == "Temporary"
    assert settings.budget.results_wanted == 100
    assert settings.budget.max_pages == 7
    assert settings.collect_details is False
    assert settings.proxy == "http://proxy:8000"
    assert settings.output_dir == tmp_path


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_bad_input_file_is_fatal(tmp_path, content):
    path = tmp_path / "INPUT.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_settings(path, environ={})


def test_missing_input_file_is_fatal(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.json", environ={})
