# src/search_facets/facet_processor.py
import csv
import logging
import os
from typing import List, Optional

from .aggregates import AggregateBucket
from .es_client import ElasticsearchService
from .neo4j_client import Neo4jService

logger = logging.getLogger(__name__)


class FacetReportProcessor:
    def __init__(
        self,
        es: ElasticsearchService,
        index_name: str,
        query_file: str,
        graph: Optional[Neo4jService] = None,
    ):
        self.es = es
        self.index_name = index_name
        self.query_file = query_file
        self.graph = graph

    # ---------------------------------------------------------
    # 1) query_file 기반 집계 조회
    # ---------------------------------------------------------
    def collect(self) -> List[AggregateBucket]:
        buckets = self.es.facets_from_query_file(
            index_name=self.index_name,
            query_file=self.query_file,
        )
        for bucket in buckets:
            logger.info(
                "집계 %s: key %d개, 문서 합계 %d",
                bucket.name,
                len(bucket.key_count),
                bucket.total,
            )
        return buckets

    # ---------------------------------------------------------
    # 2) 집계 결과 CSV 저장
    #    컬럼: aggregation,key,doc_count (doc_count 내림차순)
    # ---------------------------------------------------------
    def write_csv(self, buckets: List[AggregateBucket], output_path: str) -> int:
        dirname = os.path.dirname(output_path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)

        rows = 0
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["aggregation", "key", "doc_count"])
            for bucket in buckets:
                for key, count in bucket.most_common():
                    writer.writerow([bucket.name, key, count])
                    rows += 1

        logger.info("집계 CSV 저장: %s (rows=%d)", output_path, rows)
        return rows

    # ---------------------------------------------------------
    # 3) 조회 → CSV → (선택) Neo4j 적재
    # ---------------------------------------------------------
    def process(self, output_path: str) -> List[AggregateBucket]:
        logger.info(
            "집계 리포트 시작: index=%s, query_file=%s",
            self.index_name,
            self.query_file,
        )

        buckets = self.collect()
        self.write_csv(buckets, output_path)

        if self.graph is not None:
            for bucket in buckets:
                self.graph.merge_bucket(bucket)
            logger.info("Neo4j 적재 완료: 집계 %d개", len(buckets))

        logger.info("집계 리포트 완료")
        return buckets
