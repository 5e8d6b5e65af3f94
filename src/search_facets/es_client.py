# src/search_facets/es_client.py
import json
import logging
import warnings
from typing import Any, Dict, List, Optional

import urllib3
from elasticsearch import Elasticsearch

from .aggregates import AggregateBucket, extract_response_aggregates

logger = logging.getLogger(__name__)

urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
warnings.filterwarnings(
    "ignore",
    message="Connecting to .* using SSL with verify_certs=False is insecure.",
)


class ElasticsearchService:
    def __init__(self, url: str, verify_certs: bool = False):
        self.client = Elasticsearch(url, verify_certs=verify_certs)
        logger.info("Elasticsearch 클라이언트 생성: %s", url)

    def _search(self, index_name: str, body: Dict[str, Any]):
        logger.debug("ES query body: %s", body)
        try:
            return self.client.search(index=index_name, body=body)
        except Exception:
            logger.exception("ES 검색 실패: index=%s", index_name)
            raise

    def search_with_query_file(self, index_name: str, query_file: str):
        logger.info("ES 검색 실행: index=%s, query_file=%s", index_name, query_file)

        with open(query_file, encoding="utf-8") as f:
            query_source = json.load(f)

        body: Dict[str, Any] = {"size": query_source.get("size", 0)}
        if "query" in query_source:
            body["query"] = query_source["query"]
        aggs = query_source.get("aggs", query_source.get("aggregations"))
        if aggs:
            body["aggs"] = aggs

        response = self._search(index_name, body)
        logger.info("ES 결과 집계 개수: %d", len(response.get("aggregations") or {}))
        return response

    @staticmethod
    def terms_aggregation_body(
        name: str,
        field: str,
        size: int = 10,
        query: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "size": 0,
            "aggs": {
                name: {
                    "terms": {
                        "field": field,
                        "size": size,
                    }
                }
            },
        }
        if query:
            body["query"] = query
        return body

    def aggregate_terms(
        self,
        index_name: str,
        name: str,
        field: str,
        size: int = 10,
        query: Optional[Dict[str, Any]] = None,
    ) -> List[AggregateBucket]:
        """
        field 기준으로 terms 집계를 수행하고 AggregateBucket 리스트를 반환한다.
        """
        logger.info(
            "terms 집계 실행: index=%s, name=%s, field=%s, size=%d",
            index_name,
            name,
            field,
            size,
        )

        response = self._search(index_name, self.terms_aggregation_body(name, field, size, query))
        buckets = extract_response_aggregates(response)

        logger.info("terms 집계 결과 bucket 개수: %d", len(buckets))
        return buckets

    def facets_from_query_file(self, index_name: str, query_file: str) -> List[AggregateBucket]:
        response = self.search_with_query_file(index_name, query_file)
        return extract_response_aggregates(response)
