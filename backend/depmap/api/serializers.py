from typing import Any


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize(obj: Any):
    """
    Turn result objects into JSON-compatible structures.
    Deterministic: sets come out sorted.
    """

    # Primitive values pass through
    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    # Lists / tuples: serialize each element
    if isinstance(obj, (list, tuple)):
        return [serialize(item) for item in obj]

    if isinstance(obj, (set, frozenset)):
        return [serialize(item) for item in sorted(obj, key=str)]

    # Dicts: serialize values
    if isinstance(obj, dict):
        return {str(k): serialize(v) for k, v in obj.items()}

    # Result types carry their own wire form
    if hasattr(obj, "to_dict"):
        return serialize(obj.to_dict())

    # dataclass-like objects
    if hasattr(obj, "__dict__"):
        return {
            key: serialize(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    # Fallback (should rarely happen)
    return str(obj)
