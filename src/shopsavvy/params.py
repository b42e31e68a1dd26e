from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Union


DateLike = Union[str, date]


def join_identifiers(identifiers: Iterable[str]) -> str:
    """
    Batch endpoints take every identifier in a single comma-separated value.
    Order is preserved; identifiers are otherwise passed through untouched.
    """
    if isinstance(identifiers, str):
        return identifiers
    return ",".join(str(i) for i in identifiers)


def _format_date(value: DateLike) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _coerce(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def compact(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None / empty-string entries so optional parameters stay off the wire."""
    out: Dict[str, Any] = {}
    for key, value in values.items():
        value = _coerce(value)
        if value is None or value == "":
            continue
        out[key] = value
    return out


def _positive(value: Optional[int]) -> Optional[int]:
    if value is None or value <= 0:
        return None
    return value


def search_params(
    query: str, limit: Optional[int] = None, offset: Optional[int] = None
) -> Dict[str, Any]:
    # Paging values of 0 or less mean "API default" and are not sent.
    return compact({"q": query, "limit": _positive(limit), "offset": _positive(offset)})


def lookup_params(
    ids: str,
    retailer: Optional[str] = None,
    format: Optional[str] = None,
) -> Dict[str, Any]:
    # "ids" is always sent, even when empty, so the API reports the problem.
    params = {"ids": ids}
    params.update(compact({"retailer": retailer, "format": format}))
    return params


def history_params(
    ids: str,
    start_date: DateLike,
    end_date: DateLike,
    retailer: Optional[str] = None,
    format: Optional[str] = None,
) -> Dict[str, Any]:
    params = lookup_params(ids, retailer=retailer, format=format)
    params["start_date"] = _format_date(start_date)
    params["end_date"] = _format_date(end_date)
    return params


def schedule_body(
    frequency: Any,
    identifier: Optional[str] = None,
    identifiers: Optional[str] = None,
    retailer: Optional[str] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    if identifiers is not None:
        body["identifiers"] = identifiers
    else:
        body["identifier"] = identifier
    body["frequency"] = _coerce(frequency)
    body.update(compact({"retailer": retailer}))
    return body


def removal_body(
    identifier: Optional[str] = None, identifiers: Optional[str] = None
) -> Dict[str, Any]:
    if identifiers is not None:
        return {"identifiers": identifiers}
    return {"identifier": identifier}
