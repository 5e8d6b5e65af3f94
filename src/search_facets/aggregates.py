# src/search_facets/aggregates.py
import json
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import DecodeError

logger = logging.getLogger(__name__)

# 래핑(한 단계 감싼 집계) 해제 최대 깊이. 정상 응답은 2단계면 충분하다.
MAX_UNWRAP_DEPTH = 32


class JsonKind(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


@dataclass(frozen=True)
class JsonValue:
    """
    json.loads 결과 하나를 종류(kind)와 함께 감싼 값.
    bool 은 int 의 하위 타입이므로 NUMBER 보다 먼저 판별한다.
    """

    kind: JsonKind
    value: Any

    @classmethod
    def of(cls, value: Any) -> "JsonValue":
        if isinstance(value, Mapping):
            return cls(JsonKind.OBJECT, value)
        if isinstance(value, (list, tuple)):
            return cls(JsonKind.ARRAY, value)
        if isinstance(value, str):
            return cls(JsonKind.STRING, value)
        if isinstance(value, bool):
            return cls(JsonKind.BOOL, value)
        if isinstance(value, (int, float)):
            return cls(JsonKind.NUMBER, value)
        return cls(JsonKind.NULL, None)

    def items(self) -> List[Tuple[str, "JsonValue"]]:
        if self.kind is not JsonKind.OBJECT:
            return []
        return [(k, JsonValue.of(v)) for k, v in self.value.items()]

    def get(self, key: str) -> "JsonValue":
        if self.kind is not JsonKind.OBJECT or key not in self.value:
            return _MISSING
        return JsonValue.of(self.value[key])

    def elements(self) -> List["JsonValue"]:
        if self.kind is not JsonKind.ARRAY:
            return []
        return [JsonValue.of(v) for v in self.value]


# 키 자체가 없는 경우. JSON null 과 구분하기 위해 별도 인스턴스를 둔다.
_MISSING = JsonValue(JsonKind.NULL, None)


@dataclass(frozen=True)
class AggregateBucket:
    """
    terms 집계 하나의 결과.

    "aggregations":{"tags":{"buckets":[{"key":"bass","doc_count":1},{"key":"drum","doc_count":1}]}}
    → AggregateBucket(name="tags", key_count={"bass": 1, "drum": 1})
    """

    name: str
    key_count: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "key_count", MappingProxyType(dict(self.key_count)))

    def __eq__(self, other):
        if not isinstance(other, AggregateBucket):
            return NotImplemented
        return self.name == other.name and dict(self.key_count) == dict(other.key_count)

    def __hash__(self):
        return hash((self.name, frozenset(self.key_count.items())))

    @property
    def total(self) -> int:
        return sum(self.key_count.values())

    def keys(self) -> List[str]:
        return list(self.key_count)

    def most_common(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        ordered = sorted(self.key_count.items(), key=lambda kv: (-kv[1], kv[0]))
        return ordered if n is None else ordered[:n]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "key_count": dict(self.key_count)}


def _reject_constant(name: str):
    # json 모듈은 NaN / Infinity 를 기본으로 허용하지만 표준 JSON 이 아니다.
    raise ValueError(f"허용되지 않는 JSON 상수: {name}")


def normalize_bucket(name: str, value: JsonValue, depth: int = 0) -> AggregateBucket:
    key_count: Dict[str, int] = {}

    if value.kind is not JsonKind.OBJECT:
        return AggregateBucket(name, key_count)

    buckets = value.get("buckets")
    if buckets is _MISSING:
        # 한 단계 아래로 내려간다 (예: filter 집계 안에 terms 집계).
        if depth >= MAX_UNWRAP_DEPTH:
            logger.debug("집계 래핑 깊이 초과: name=%s, depth=%d", name, depth)
            return AggregateBucket(name, key_count)
        for inner_name, inner_value in value.items():
            if inner_name == "doc_count":
                continue
            return normalize_bucket(inner_name, inner_value, depth + 1)
        return AggregateBucket(name, key_count)

    # buckets 는 "key" 와 "doc_count" 를 가진 객체들의 배열이어야 한다
    for element in buckets.elements():
        key = element.get("key")
        doc_count = element.get("doc_count")
        if key.kind is not JsonKind.STRING or doc_count.kind is not JsonKind.NUMBER:
            logger.debug("bucket 항목 건너뜀: name=%s, element=%s", name, element.value)
            continue
        if isinstance(doc_count.value, float) and not math.isfinite(doc_count.value):
            # 1e400 같은 값은 inf 로 디코딩된다
            continue
        key_count[key.value] = int(doc_count.value)

    return AggregateBucket(name, key_count)


def extract_aggregates_from_mapping(aggregations: Any) -> List[AggregateBucket]:
    root = JsonValue.of(aggregations)
    if root.kind is not JsonKind.OBJECT:
        raise DecodeError(f"aggregations 최상위는 JSON 객체여야 합니다: {root.kind.value}")

    aggs: List[AggregateBucket] = []
    for name, value in root.items():
        bucket = normalize_bucket(name, value)
        if bucket.key_count:
            aggs.append(bucket)

    logger.debug("집계 추출 완료: 입력=%d, bucket=%d", len(root.value), len(aggs))
    return aggs


def extract_aggregates(raw_aggregations: Union[bytes, str]) -> List[AggregateBucket]:
    """
    검색 응답의 aggregations 부분(직렬화된 JSON)을 AggregateBucket 리스트로 변환한다.
    key 가 하나도 없는 집계는 결과에서 제외된다.
    """
    try:
        decoded = json.loads(raw_aggregations, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, UnicodeDecodeError 모두 ValueError 하위 타입
        raise DecodeError(f"aggregations JSON 디코딩 실패: {e}") from e

    return extract_aggregates_from_mapping(decoded)


def extract_response_aggregates(response: Mapping[str, Any]) -> List[AggregateBucket]:
    """
    검색 응답 전체에서 "aggregations" 를 꺼내 변환한다.
    집계를 요청하지 않은 응답이면 빈 리스트.
    """
    aggregations = response.get("aggregations")
    if aggregations is None:
        return []
    return extract_aggregates_from_mapping(aggregations)
