"""Field resolution and tolerant parsing helpers for upstream JSON."""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional

DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
)
TRUE_VALUES = {"yes", "y", "true", "1", "active"}
FALSE_VALUES = {"no", "n", "false", "0", "inactive"}
_MISSING = object()


def resolve_path(data: Any, path: str) -> Any:
    """
    Walk a dotted path ("award.awardee.name", "naicsCodes.0") through dicts and lists.
    Returns None when any segment is absent.
    """
    current = data
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part, _MISSING)
        elif isinstance(current, list) and part.isdigit():
            idx = int(part)
            current = current[idx] if idx < len(current) else _MISSING
        else:
            return None
        if current is _MISSING:
            return None
    return current


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, (list, dict)) and not value:
        return True
    return False


def first_present(data: Any, paths: Iterable[str]) -> Any:
    """Return the first non-blank value among candidate paths, in order."""
    for path in paths:
        value = resolve_path(data, path)
        if not _is_blank(value):
            return value
    return None


def first_text(data: Any, paths: Iterable[str]) -> Optional[str]:
    """Like first_present but only accepts scalars, returned as stripped strings."""
    for path in paths:
        value = resolve_path(data, path)
        if isinstance(value, bool) or isinstance(value, (dict, list)):
            continue
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an upstream date; anything unparseable becomes None. Naive values are UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        parsed = None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            for fmt in DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def first_date(data: Any, paths: Iterable[str]) -> Optional[datetime]:
    """First candidate that parses as a date wins."""
    for path in paths:
        parsed = parse_date(resolve_path(data, path))
        if parsed is not None:
            return parsed
    return None


def parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in TRUE_VALUES:
            return True
        if v in FALSE_VALUES:
            return False
    return None


def description_text(value: Any) -> Optional[str]:
    """
    Flatten a description that may be a string, a list of strings/objects, or an object.
    Objects contribute their body/text/description/content member.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        for key in ("body", "text", "description", "content"):
            inner = value.get(key)
            if isinstance(inner, str) and inner.strip():
                return inner.strip()
        return None
    if isinstance(value, list):
        parts = [description_text(item) for item in value]
        joined = "\n\n".join(p for p in parts if p)
        return joined or None
    return str(value)


def as_list(value: Any) -> list[Any]:
    """Wrap scalars in a list; pass lists through verbatim; None -> []."""
    if value is None:
        return []
    if isinstance(value, list):
        return list(value)
    if isinstance(value, str) and not value.strip():
        return []
    return [value]
