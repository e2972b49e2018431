"""Utility functions for CLI operations."""

_UNITS = ('KiB', 'MiB', 'GiB', 'TiB')


def format_file_size(size_bytes: int) -> str:
    """
    Human-readable size in binary units, e.g. "512 B" or "10.50 MiB".
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    for unit in _UNITS:
        size /= 1024.0
        if size < 1024.0 or unit == _UNITS[-1]:
            return f"{size:.2f} {unit}"
