"""Formatting utilities for amounts and percentages."""

from __future__ import annotations

from typing import Optional, Union


def format_amount(amount: Union[float, int], decimals: int = 0) -> str:
    """Format an amount with thousands separators.
    
    Whole amounts are shown without a fractional part unless ``decimals`` asks
    for one.
    
    Example:
        >>> format_amount(1234.5)
        '1,234'
        >>> format_amount(1234.5, decimals=2)
        '1,234.50'
    """
    if decimals == 0 and float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.{decimals}f}"


def format_currency(amount: Union[float, int], currency: Optional[str] = None) -> str:
    """Format a currency amount with an optional currency suffix.
    
    Args:
        amount: The amount to format
        currency: Currency label appended after the number (e.g. ``'SAR'``)
        
    Returns:
        Formatted currency string (e.g., "1,234 SAR" or "1,234")
        
    Example:
        >>> format_currency(1234, 'SAR')
        '1,234 SAR'
        >>> format_currency(-50.25)
        '-50.25'
    """
    decimals = 0 if float(amount).is_integer() else 2
    formatted = format_amount(amount, decimals=decimals)
    return f"{formatted} {currency}" if currency else formatted


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a percentage value (already scaled to 0-100).
    
    Example:
        >>> format_percent(52.345)
        '52.3%'
    """
    return f"{value:.{decimals}f}%"
