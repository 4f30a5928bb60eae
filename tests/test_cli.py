# File: tests/test_cli.py
"""Тесты для CLI (`a11y_scout.cli`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import asyncio
import json
import logging

import pytest
from click.testing import CliRunner

import a11y_scout.cli as cli_module
from a11y_scout.cli import cli
from a11y_scout.crawler.models import CrawlResult
from a11y_scout.errors import BrowserLaunchError
from a11y_scout.logger import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    lg = logging.getLogger(LOGGER_NAME)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
    lg.propagate = True


@pytest.fixture(autouse=True)
def patch_crawl(monkeypatch):
    """Патчим crawl_site: фиксированный результат без запуска браузера."""
    calls = []

    async def fake_crawl(request, settings=None, automation=None):
        calls.append((request, settings))
        return CrawlResult(urls=[request.start_url], total_found=1, crawl_time=5)

    monkeypatch.setattr(cli_module, "crawl_site", fake_crawl)
    return calls


def test_cli_module_exposes_patchable_entry_points():
    assert callable(cli_module.crawl_site)
    assert callable(cli_module.run_server)
    assert cli_module.cli is cli


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "A11yScout" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(json.dumps({"user_agent": "Agent/1.0", "max_pages": 3}), encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["user_agent"] == "Agent/1.0"
    assert data["max_pages"] == 3


def test_bad_config_reports_error(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("max_pages: -5\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_crawl_stdout(tmp_path, monkeypatch, patch_crawl):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["crawl", "https://example.com"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "urls": ["https://example.com"],
        "total_found": 1,
        "crawl_time": 5,
    }
    request, settings = patch_crawl[0]
    assert (request.max_pages, request.max_depth, request.same_domain_only) == (10, 3, True)
    assert settings.user_agent == "A11yScout-Crawler/1.0"


def test_crawl_overrides(tmp_path, monkeypatch, patch_crawl):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(
        cli,
        ["crawl", "https://example.com", "--max-pages", "50", "--max-depth", "-1", "--all-domains"],
    )
    assert result.exit_code == 0
    request, _ = patch_crawl[0]
    assert (request.max_pages, request.max_depth, request.same_domain_only) == (50, -1, False)


def test_crawl_rejects_zero_max_pages(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["crawl", "https://example.com", "--max-pages", "0"])
    assert result.exit_code == 2


def test_crawl_json_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "out.json"
    result = CliRunner().invoke(cli, ["crawl", "https://example.com", "--json", str(out)])
    assert result.exit_code == 0
    assert json.loads(out.read_text(encoding="utf-8"))["urls"] == ["https://example.com"]


def test_crawl_html_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "report.html"
    result = CliRunner().invoke(cli, ["crawl", "https://example.com", "--html", str(out)])
    assert result.exit_code == 0
    assert "https://example.com" in out.read_text(encoding="utf-8")


def test_crawl_timeout(monkeypatch, tmp_path):
    async def slow(request, settings=None, automation=None):
        await asyncio.sleep(2)
        return CrawlResult()

    monkeypatch.setattr(cli_module, "crawl_site", slow)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["crawl", "https://example.com", "--crawl-timeout", "0.1"])
    assert result.exit_code == 1
    assert "не завершён" in result.output


def test_crawl_fatal_error(monkeypatch, tmp_path):
    async def broken(request, settings=None, automation=None):
        raise BrowserLaunchError("Cannot launch Chromium: missing executable")

    monkeypatch.setattr(cli_module, "crawl_site", broken)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["crawl", "https://example.com"])
    assert result.exit_code == 1
    assert "missing executable" in result.output


def test_crawl_empty_url_reports_error(tmp_path, monkeypatch, patch_crawl):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["crawl", ""])
    assert result.exit_code == 1
    assert "Ошибка при обходе" in result.output
    assert "start_url" in result.output
    assert patch_crawl == []


def test_serve_uses_config(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(cli_module, "run_server", lambda cfg, host=None, port=None: calls.append((cfg, host, port)))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    assert calls[0][1:] == (None, 9000)
