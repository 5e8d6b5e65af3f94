# src/search_facets/cli.py
import argparse
import json
import logging
import sys
from typing import List, Optional

from .aggregates import extract_aggregates
from .config import load_config
from .errors import FacetError
from .es_client import ElasticsearchService
from .facet_processor import FacetReportProcessor
from .logging_config import setup_logging
from .neo4j_client import Neo4jService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="검색 응답의 terms 집계를 facet 리스트로 추출")

    parser.add_argument(
        "mode",
        nargs="?",
        default="report",
        choices=["report", "extract"],
        help="실행 모드 선택: report / extract (기본값: report)",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default="-",
        help="extract 모드 입력 파일 (aggregations JSON, '-' 이면 stdin)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.yml",
        help="설정 파일 경로 (기본값: config.yml)",
    )
    parser.add_argument(
        "--graph",
        action="store_true",
        help="report 모드에서 집계 결과를 Neo4j 에도 적재",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="로그 레벨 (설정 파일 값보다 우선)",
    )
    return parser


def run_extract(source: str) -> int:
    if source == "-":
        raw = sys.stdin.buffer.read()
    else:
        try:
            with open(source, "rb") as f:
                raw = f.read()
        except OSError as e:
            logger.error("[extract] 입력 파일을 읽을 수 없습니다: %s (%s)", source, e)
            return 1

    buckets = extract_aggregates(raw)
    for bucket in buckets:
        sys.stdout.write(json.dumps(bucket.to_dict(), ensure_ascii=False) + "\n")

    logger.info("[extract] bucket %d개 출력", len(buckets))
    return 0


def run_report(config_path: str, graph: bool, log_level: Optional[str]) -> int:
    cfg = load_config(config_path)
    setup_logging(log_level or cfg.log_level)

    logger.info("애플리케이션 시작 (mode=report)")

    es_service = ElasticsearchService(cfg.es.url, verify_certs=cfg.es.verify_certs)
    neo_service = None
    if graph:
        neo_service = Neo4jService(cfg.neo4j.uri, cfg.neo4j.user, cfg.neo4j.password)

    processor = FacetReportProcessor(
        es=es_service,
        index_name=cfg.es.index_name,
        query_file=cfg.es.query_file,
        graph=neo_service,
    )

    try:
        processor.process(cfg.output_path)
        if neo_service is not None:
            neo_service.test_connection()
    finally:
        if neo_service is not None:
            neo_service.close()
        logger.info("애플리케이션 종료")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.mode == "extract":
            setup_logging(args.log_level or "WARNING")
            return run_extract(args.source)
        return run_report(args.config, args.graph, args.log_level)
    except FacetError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
