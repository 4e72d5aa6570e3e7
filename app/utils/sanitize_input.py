import json
from typing import Any, List, Mapping, Optional


def sanitize_input(value: Any) -> Any:
    """Trim a text value and drop ``<`` and ``>``. Anything else is returned as is."""
    if not isinstance(value, str):
        return value
    return value.strip().replace("<", "").replace(">", "")


def sanitize_fields(fields: Mapping[str, Any]) -> dict:
    return {key: sanitize_input(value) for key, value in fields.items()}


def stringify(value: Any) -> str:
    """Render a scalar the way the web form would display it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_list_field(value: Any) -> Optional[List[str]]:
    """
    Normalize a list-valued form field (preferred routes, requested positions).

    Form posts send these either as a JSON-encoded array, a bare string or
    repeated keys; JSON bodies send a real array.
    """
    if value is None or value == "":
        return None
    if isinstance(value, (list, tuple)):
        return [stringify(item) for item in value]
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return [value]
        if isinstance(parsed, list):
            return [stringify(item) for item in parsed]
        if parsed is None:
            return [value]
        return [stringify(parsed)]
    return [stringify(value)]
