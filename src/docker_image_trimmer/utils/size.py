"""Human readable size formatting."""

_UNITS = ["KiB", "MiB", "GiB", "TiB"]


def format_size(num_bytes: int) -> str:
    """Format a byte count with binary units.

    Examples:
        format_size(512)      # "512 B"
        format_size(1536)     # "1.5 KiB"
        format_size(3 << 30)  # "3.0 GiB"
    """
    if num_bytes < 1024:
        return f"{num_bytes} B"

    size = float(num_bytes)
    unit = _UNITS[0]
    for unit in _UNITS:
        size /= 1024
        if size < 1024:
            break
    return f"{size:.1f} {unit}"
