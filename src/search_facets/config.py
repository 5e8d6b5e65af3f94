# src/search_facets/config.py
import os
from dataclasses import dataclass
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from .errors import ConfigError


@dataclass
class ESConfig:
    url: str
    verify_certs: bool
    index_name: str
    query_file: str


@dataclass
class Neo4jConfig:
    uri: str
    user: str
    password: str


@dataclass
class AppConfig:
    log_level: str
    output_path: str
    es: ESConfig
    neo4j: Neo4jConfig


def load_config(path: str = "config.yml") -> AppConfig:
    # .env 먼저 로드
    load_dotenv()

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"설정 파일을 찾을 수 없습니다: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"설정 파일 YAML 파싱 실패: {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"설정 파일 최상위는 매핑이어야 합니다: {path}")

    # YAML + ENV 합치기
    es_section: Dict[str, Any] = raw.get("elasticsearch") or {}
    neo4j_section: Dict[str, Any] = raw.get("neo4j") or {}
    for section_name, section in (("elasticsearch", es_section), ("neo4j", neo4j_section)):
        if not isinstance(section, dict):
            raise ConfigError(f"설정 섹션 {section_name} 은(는) 매핑이어야 합니다: {path}")

    es_cfg = ESConfig(
        url=os.getenv("ELASTIC_URL", es_section.get("url", "")),
        verify_certs=bool(es_section.get("verify_certs", False)),
        index_name=es_section.get("index_name", ""),
        query_file=es_section.get("query_file", "./query/facets.json"),
    )

    neo_cfg = Neo4jConfig(
        uri=os.getenv("NEO4J_URI", neo4j_section.get("uri", "bolt://localhost:7687")),
        user=os.getenv("NEO4J_USER", neo4j_section.get("user", "neo4j")),
        password=os.getenv(
            "NEO4J_PASSWORD",
            neo4j_section.get("password", "neo4j"),
        ),
    )

    return AppConfig(
        log_level=raw.get("log_level", "INFO"),
        output_path=raw.get("output_path", "./result/facets.csv"),
        es=es_cfg,
        neo4j=neo_cfg,
    )
