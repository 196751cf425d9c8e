import json
from decimal import Decimal
from typing import Dict, Iterable

from chalicelib.utils.exceptions import ValidationError


def parse_raw_body(chalice_request, parse_float=Decimal) -> Dict:
    request_raw_body = chalice_request.raw_body
    if not request_raw_body:
        return {}
    try:
        body = json.loads(request_raw_body, parse_float=parse_float)
    except ValueError:
        raise ValidationError('Request body is not a valid JSON document')
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def require_fields(body: Dict, fields: Iterable[str], message: str) -> None:
    """
    Raise ValidationError(message) if any of fields is missing or empty
    """
    if any(body.get(field) in (None, '', [], {}) for field in fields):
        raise ValidationError(message)


def cleanup_dict(item: dict, list_of_values: list = None) -> dict:
    """ Remove fields whose value is in list_of_values (None by default). Supports one nesting.  """
    if list_of_values is None:
        list_of_values = [None]

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean


def chunks(values: list, size: int):
    for i in range(0, len(values), size):
        yield values[i:i + size]
