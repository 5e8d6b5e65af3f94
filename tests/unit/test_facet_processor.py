from __future__ import annotations

import csv

from search_facets.aggregates import AggregateBucket
from search_facets.facet_processor import FacetReportProcessor


class FakeES:
    def __init__(self, buckets):
        self.buckets = buckets
        self.calls = []

    def facets_from_query_file(self, index_name, query_file):
        self.calls.append((index_name, query_file))
        return self.buckets


class FakeGraph:
    def __init__(self):
        self.merged = []

    def merge_bucket(self, bucket):
        self.merged.append(bucket)
        return len(bucket.key_count)


def _read_rows(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def test_write_csv_orders_keys_by_count(tmp_path):
    processor = FacetReportProcessor(es=FakeES([]), index_name="idx", query_file="q.json")
    output = tmp_path / "result" / "facets.csv"

    rows = processor.write_csv(
        [AggregateBucket("tags", {"bass": 1, "drum": 4}), AggregateBucket("genre", {"jazz": 2})],
        str(output),
    )

    assert rows == 3
    assert _read_rows(output) == [
        ["aggregation", "key", "doc_count"],
        ["tags", "drum", "4"],
        ["tags", "bass", "1"],
        ["genre", "jazz", "2"],
    ]


def test_write_csv_quotes_keys_with_commas(tmp_path):
    processor = FacetReportProcessor(es=FakeES([]), index_name="idx", query_file="q.json")
    output = tmp_path / "facets.csv"

    processor.write_csv([AggregateBucket("q", {"a,b": 1})], str(output))

    assert _read_rows(output)[1] == ["q", "a,b", "1"]


def test_process_without_graph(tmp_path):
    es = FakeES([AggregateBucket("tags", {"bass": 1})])
    processor = FacetReportProcessor(es=es, index_name="idx", query_file="q.json")

    buckets = processor.process(str(tmp_path / "out.csv"))

    assert es.calls == [("idx", "q.json")]
    assert buckets == [AggregateBucket("tags", {"bass": 1})]
    assert (tmp_path / "out.csv").exists()


def test_process_loads_graph(tmp_path):
    buckets = [AggregateBucket("tags", {"bass": 1}), AggregateBucket("genre", {"jazz": 2})]
    graph = FakeGraph()
    processor = FacetReportProcessor(es=FakeES(buckets), index_name="idx", query_file="q.json", graph=graph)

    processor.process(str(tmp_path / "out.csv"))

    assert graph.merged == buckets
