"""Utility functions for the shift planner."""


def format_currency(amount: float) -> str:
    """
    Format an amount with a dollar sign, thousand separators and 2 decimals.

    Args:
        amount: Amount to format

    Returns:
        Formatted string

    Examples:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-86.5)
        '-$86.50'
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_computation_time(elapsed_ms: int) -> str:
    """
    Format an elapsed time in milliseconds for display.

    Examples:
        >>> format_computation_time(850)
        '850ms'
        >>> format_computation_time(12345)
        '12.3s'
        >>> format_computation_time(125000)
        '2m 5s'
    """
    if elapsed_ms < 1000:
        return f"{elapsed_ms}ms"
    if elapsed_ms < 60000:
        return f"{elapsed_ms / 1000:.1f}s"
    minutes = elapsed_ms // 60000
    seconds = (elapsed_ms % 60000) // 1000
    return f"{minutes}m {seconds}s"
