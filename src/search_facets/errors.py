# src/search_facets/errors.py


class FacetError(ValueError):
    """search_facets 에서 발생하는 모든 예외의 기본 클래스."""


class DecodeError(FacetError):
    """집계 JSON 최상위가 올바른 JSON 객체가 아닐 때."""


class ConfigError(FacetError):
    """설정 파일을 읽을 수 없거나 형식이 잘못되었을 때."""
