"""
Flattening of validated options into EC2 query parameters.

The query API takes a flat set of string parameters. Lists are sent as
``Prefix.1``, ``Prefix.2``, ... and lists of structures as
``Prefix.1.Field``, ``Prefix.1.Other.Field``, ...
"""
import base64
from enum import Enum
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel

ParameterMap = dict[str, str]


def stringify(value: Any) -> str:
    """Render a scalar the way the query API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def scalar_params(values: Iterable[tuple[str, Any]]) -> ParameterMap:
    """Build parameters from (name, value) pairs, skipping values that are None."""
    return {name: stringify(value) for name, value in values if value is not None}


def pathlist(prefix: str, values: Union[Any, Iterable[Any]]) -> ParameterMap:
    """Encode a list as ``prefix.N`` parameters, numbered from 1.

    A lone string (or other scalar) counts as a one element list.
    """
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        values = [values]
    return {f"{prefix}.{i}": stringify(value) for i, value in enumerate(values, start=1)}


def pathhashlist(
    prefix: str,
    records: Iterable[Union[BaseModel, Mapping[str, Any]]],
    suffixes: Mapping[str, str],
) -> ParameterMap:
    """Encode a list of records as ``prefix.N.Suffix`` parameters.

    Only the fields a record actually carries are written, so two records in
    the same list can produce different sets of keys.
    """
    params = {}
    for i, record in enumerate(records, start=1):
        if isinstance(record, BaseModel):
            fields = record.model_dump(exclude_unset=True, exclude_none=True)
        else:
            fields = {name: value for name, value in record.items() if value is not None}
        for name, value in fields.items():
            suffix = suffixes.get(name)
            if suffix is None:
                continue
            params[f"{prefix}.{i}.{suffix}"] = stringify(value)
    return params


def encode_user_data(user_data: Optional[Union[str, bytes]], base64_encoded: bool) -> Optional[str]:
    # Base64 output is kept on a single line.
    if user_data is None:
        return None
    if not base64_encoded:
        return user_data.decode("utf-8") if isinstance(user_data, bytes) else user_data
    raw = user_data.encode("utf-8") if isinstance(user_data, str) else user_data
    return base64.b64encode(raw).decode("ascii").replace("\n", "").strip()
