from core.errors import ValidationError


def validate_positive_int(value: int, param_name: str, max_value: int | None = None) -> int:
    """Validate a positive integer."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValidationError(f"{param_name} must be a positive integer")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{param_name} cannot exceed {max_value}")

    return value


def validate_tab_id(tab_id: str | None, param_name: str = "tab_id") -> str | None:
    """Validate an optional document tab ID."""
    if tab_id is None:
        return None

    if not isinstance(tab_id, str):
        raise ValidationError(f"{param_name} must be a string")

    tab_id = tab_id.strip()
    if not tab_id:
        raise ValidationError(f"{param_name} cannot be empty")

    return tab_id


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    """Interpret an environment variable value as a boolean flag."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")
