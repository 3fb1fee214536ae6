import crawler.__main__ as cli
from crawler.session import CrawlSession


def test_missing_seed_exits_with_2(capsys):
    assert cli.main([]) == 2
    assert "Uso" in capsys.readouterr().err


def test_invalid_seed_exits_with_2():
    assert cli.main(["invalid-url"]) == 2


def test_runs_crawl_with_json_sink(monkeypatch, tmp_path):
    seen = {}

    async def fake_crawl(seed_url, config, *, sink=None, fetch_fn=None):
        seen["seed"] = seed_url
        seen["config"] = config
        sink.write({seed_url: []}, {})
        return CrawlSession.create(seed_url, config)

    monkeypatch.setattr(cli, "crawl", fake_crawl)

    code = cli.main(["http://example.com", "--max-concurrency", "2", "--max-retries", "1", "--output-dir", str(tmp_path)])

    assert code == 0
    assert seen["seed"] == "http://example.com"
    assert seen["config"].max_concurrency == 2
    assert seen["config"].max_retries == 1
    assert (tmp_path / "crawled_data.json").exists()
    assert (tmp_path / "failed_urls.json").exists()


def test_bad_option_value_exits_with_2():
    assert cli.main(["http://example.com", "--max-concurrency", "0"]) == 2
