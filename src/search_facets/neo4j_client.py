# src/search_facets/neo4j_client.py
import logging
from typing import Any, Dict, List

from neo4j import GraphDatabase

from .aggregates import AggregateBucket

logger = logging.getLogger(__name__)


class Neo4jService:
    def __init__(self, uri: str, user: str, password: str):
        logger.info("Neo4j 드라이버 초기화: %s", uri)
        self._driver = GraphDatabase.driver(uri, auth=(user, password))

    def close(self):
        logger.info("Neo4j 드라이버 종료")
        self._driver.close()

    def test_connection(self):
        with self._driver.session() as session:
            msg = session.run("RETURN 'Connected!' AS msg").single()["msg"]
            logger.info("Neo4j 연결 상태: %s", msg)

            agg_count = session.run("MATCH (a:Aggregation) RETURN count(a) AS c").single()["c"]
            rel_count = session.run("MATCH ()-[r:HAS_TERM]->() RETURN count(r) AS c").single()["c"]
            logger.info("Aggregation 노드 개수: %d, HAS_TERM 관계 개수: %d", agg_count, rel_count)

    def clear_all(self):
        logger.warning("모든 노드/관계를 삭제합니다.")
        with self._driver.session() as session:
            session.run("MATCH (n) DETACH DELETE n").consume()

    def merge_bucket(self, bucket: AggregateBucket) -> int:
        """
        (:Aggregation {name})-[:HAS_TERM {count}]->(:Term {key}) 형태로 적재.
        같은 집계를 다시 적재하면 count 는 최신 값으로 덮어쓴다.
        """
        logger.debug("집계 적재: %s (keys=%d)", bucket.name, len(bucket.key_count))
        query = """
        MERGE (a:Aggregation {name:$name})
        WITH a
        UNWIND $terms AS term
        MERGE (t:Term {key:term.key})
        MERGE (a)-[r:HAS_TERM]->(t)
        SET r.count = term.count
        RETURN count(r) AS c
        """
        terms = [{"key": k, "count": c} for k, c in bucket.key_count.items()]
        with self._driver.session() as session:
            record = session.run(query, name=bucket.name, terms=terms).single()
            return record["c"] if record else 0

    def get_terms(self, name: str, limit: int = 50) -> List[Dict[str, Any]]:
        logger.debug("HAS_TERM 리스트 조회: %s", name)
        query = """
        MATCH (a:Aggregation {name:$name})-[r:HAS_TERM]->(t:Term)
        RETURN t.key AS key, r.count AS count
        ORDER BY count DESC, key
        LIMIT $limit
        """
        with self._driver.session() as session:
            result = session.run(query, name=name, limit=limit)
            return result.data()  # 리스트로 한 번에 가져오기
