from __future__ import annotations

import json

from search_facets import cli
from search_facets.aggregates import AggregateBucket


def test_extract_mode_prints_buckets(tmp_path, capsys):
    source = tmp_path / "aggs.json"
    source.write_bytes(b'{"tags":{"buckets":[{"key":"bass","doc_count":1},{"key":"drum","doc_count":1}]}}')

    code = cli.main(["extract", str(source)])

    out = capsys.readouterr().out.strip().splitlines()
    assert code == 0
    assert [json.loads(line) for line in out] == [{"name": "tags", "key_count": {"bass": 1, "drum": 1}}]


def test_extract_mode_invalid_json_exits_1(tmp_path):
    source = tmp_path / "aggs.json"
    source.write_bytes(b"[1,2,3]")

    assert cli.main(["extract", str(source)]) == 1


def test_extract_mode_missing_file_exits_1(tmp_path):
    assert cli.main(["extract", str(tmp_path / "missing.json")]) == 1


def test_report_mode_missing_config_exits_1(tmp_path):
    assert cli.main(["report", "-c", str(tmp_path / "missing.yml")]) == 1


def test_report_mode_runs_processor(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yml"
    output_path = tmp_path / "result" / "facets.csv"
    config_path.write_text(
        "output_path: {}\n"
        "elasticsearch:\n"
        "  url: https://es.local:9200/\n"
        "  index_name: logs\n"
        "  query_file: ./q.json\n".format(output_path),
        encoding="utf-8",
    )
    monkeypatch.delenv("ELASTIC_URL", raising=False)

    created = {}

    class FakeService:
        def __init__(self, url, verify_certs=False):
            created["url"] = url

        def facets_from_query_file(self, index_name, query_file):
            created["query"] = (index_name, query_file)
            return [AggregateBucket("tags", {"bass": 1})]

    monkeypatch.setattr(cli, "ElasticsearchService", FakeService)

    code = cli.main(["report", "-c", str(config_path)])

    assert code == 0
    assert created == {"url": "https://es.local:9200/", "query": ("logs", "./q.json")}
    assert output_path.read_text(encoding="utf-8").splitlines()[1] == "tags,bass,1"
