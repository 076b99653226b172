"""Optional-chaining accessors for supplier documents.

Supplier payloads are deeply nested and not guaranteed to carry every
field. Everything in the normalization core reads through these helpers
instead of indexing directly.
"""

MISSING = object()


def lookup(data, path):
    """Walk ``path`` (dict keys / list indexes) through ``data``.

    Returns ``(True, value)`` when every step resolves and ``(False, None)``
    as soon as one does not.
    """
    current = data
    for step in path:
        if isinstance(step, int) and not isinstance(step, bool):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return False, None
            current = current[step]
        elif isinstance(current, dict) and step in current:
            current = current[step]
        else:
            return False, None
    return True, current


def dig(data, *path, default=None):
    found, value = lookup(data, path)
    if not found or value is None:
        return default
    return value


def first_found(data, paths):
    """Try each path in order, return the first ``(path, value)`` that resolves."""
    for path in paths:
        found, value = lookup(data, path)
        if found and value is not None:
            return path, value
    return None, None


def as_list(value) -> list:
    if isinstance(value, list):
        return value
    if value is None:
        return []
    return [value]


def dicts(value) -> list[dict]:
    return [item for item in as_list(value) if isinstance(item, dict)]


def to_amount(value) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return 0.0
    return 0.0
