from __future__ import annotations

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB


def _one_decimal(size: int, unit: int) -> str:
    # truncated, not rounded: 1.96 GiB renders as "1.9"
    tenths = size * 10 // unit
    return f"{tenths // 10}.{tenths % 10}"


def format_bytes(size: int) -> str:
    if size <= 0:
        return "0 B"
    if size < KIB:
        return f"{size} B"
    if size < MIB:
        return f"{size // KIB} KB"
    if size < GIB:
        return f"{_one_decimal(size, MIB)} MB"
    return f"{_one_decimal(size, GIB)} GB"


def relative_bar(size: int, total: int, width: int = 16) -> str:
    if width <= 0 or total <= 0:
        return ""
    ratio = min(1.0, max(0.0, size / total))
    filled = int(round(ratio * width))
    return "█" * filled + "░" * max(0, width - filled)
