# src/search_facets/logging_config.py
import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    level_obj = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=level_obj, format=LOG_FORMAT)
    # elasticsearch / neo4j 드라이버의 요청 단위 로그는 WARNING 이상만
    for noisy in ("elastic_transport", "neo4j"):
        logging.getLogger(noisy).setLevel(max(level_obj, logging.WARNING))
