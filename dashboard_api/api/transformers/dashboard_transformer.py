"""Transform engine payloads into the frontend's camelCase format."""

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _to_camel_case(snake_str: str) -> str:
    """Convert snake_case to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def _transform(value: Any, decimals: int) -> Any:
    if isinstance(value, dict):
        return {
            (_to_camel_case(k) if isinstance(k, str) else k): _transform(v, decimals)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_transform(v, decimals) for v in value]
    if isinstance(value, float):
        return round(value, decimals)
    return value


def transform_payload(payload: Any, metadata: Dict[str, Any] | None = None, decimals: int = 1) -> Dict[str, Any]:
    """Wrap a plain panel payload for the frontend.

    Keys become camelCase and floats are rounded for display; the engine keeps
    full precision.

    Args:
        payload: Plain dict/list payload from the use case
        metadata: Optional request metadata
        decimals: Decimal places for floats

    Returns:
        Frontend response body
    """
    logger.info("Transforming payload for %s", (metadata or {}).get("panel", "unknown panel"))
    return {
        "data": _transform(payload, decimals),
        "meta": _transform(metadata or {}, decimals),
    }
