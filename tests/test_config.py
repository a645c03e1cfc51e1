import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from site_mapper.config import MAX_DEPTH_LIMIT, CrawlConfig, load_config
from site_mapper.engine import make_context


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("root_url: http://example.com", None),
        (json.dumps({"root_url": "http://example.com", "max_depth": 1}), None),
        ("{}", ValidationError),
        ("root_url: [unclosed", ValueError),
        ("- just\n- a list", TypeError),
    ],
)
def test_load_config_variants(tmp_path, content, expect_exc):
    suffix = ".json" if content.strip().startswith("{") else ".yaml"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlConfig)
        assert cfg.root_url == "http://example.com"


def test_defaults():
    cfg = CrawlConfig(root_url="  http://example.com  ")
    assert cfg.root_url == "http://example.com"
    assert cfg.max_depth == 3
    assert cfg.rate_limit == 1.0
    assert cfg.crawl_timeout is None


@pytest.mark.parametrize(
    "field,value",
    [("max_depth", -1), ("timeout", 0), ("rate_limit", 0), ("crawl_timeout", -5), ("extra", 1)],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        CrawlConfig(root_url="http://example.com", **{field: value})


def test_max_depth_is_capped():
    assert CrawlConfig(root_url="http://example.com", max_depth=MAX_DEPTH_LIMIT).max_depth == 256
    with pytest.raises(ValidationError):
        CrawlConfig(root_url="http://example.com", max_depth=MAX_DEPTH_LIMIT + 1)


def test_config_is_frozen(basic_config):
    with pytest.raises(ValidationError):
        basic_config.max_depth = 5


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "root_url: http://default.test\nmax_depth: 0\n", encoding="utf-8"
    )
    cfg = load_config(None)
    assert cfg.root_url == "http://default.test"
    assert cfg.max_depth == 0


def test_unsupported_suffix(tmp_path):
    cfg_path = write_file(tmp_path, "root_url = 'x'", ".toml")
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_crawl_timeout_becomes_context_deadline():
    ctx = make_context(CrawlConfig(root_url="http://example.com", crawl_timeout=60))
    assert not ctx.cancelled
    assert ctx.reason is None
    ctx.cancel()
    assert ctx.cancelled
    assert ctx.reason == "crawl cancelled"
