def _normalize(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


def get_class(name: str, module):
    """Find a class in `module` by name, ignoring case and underscores ("reach_positions" -> ReachPositions)."""
    target = _normalize(name)
    for key, obj in module.__dict__.items():
        if isinstance(obj, type) and _normalize(key) == target:
            return obj
    raise ValueError(f"Class '{name}' not found in module {module.__name__}")
