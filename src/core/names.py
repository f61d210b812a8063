"""Player name handling: canonical form for identity, display form for presentation only."""


def normalize_name(name: str) -> str:
    """Canonical form used for storage and comparison."""
    return name.strip().lower()


def format_name_for_display(name: str) -> str:
    """Capitalize the first letter of the canonical name. Never persisted."""
    normalized = normalize_name(name)
    if not normalized:
        return name
    return normalized[0].upper() + normalized[1:]


def same_player(name: str, other: str) -> bool:
    return normalize_name(name) == normalize_name(other)
