"""Shared formatting helpers used across the assistant."""

CRORE = 10_000_000
LAKH = 100_000


def format_amount(value: int) -> str:
    """Render a rupee amount in the compact Indian style.

    Examples:
        >>> format_amount(20000000)
        '2.0Cr'
        >>> format_amount(4000000)
        '40.0L'
        >>> format_amount(15000)
        '15,000'
    """
    if value >= CRORE:
        return f"{value / CRORE:.1f}Cr"
    if value >= LAKH:
        return f"{value / LAKH:.1f}L"
    return f"{value:,}"


def format_rupees(value: int) -> str:
    """Prefix a formatted amount with the rupee symbol."""
    return f"₹{format_amount(value)}"
