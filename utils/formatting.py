"""
Formatting utilities.
"""


def format_price(amount: int, currency: str = "EUR") -> str:
    """
    Format an integer listing price.

    Args:
        amount: The amount in whole units.
        currency: Currency code (default EUR).

    Returns:
        Formatted price string, e.g. "€125.000".
    """
    symbols = {
        "EUR": "€",
        "USD": "$",
        "RSD": "RSD ",
    }
    symbol = symbols.get(currency, currency + " ")
    # Serbian listings group thousands with dots
    return f"{symbol}{amount:,}".replace(",", ".")


def format_area(value: float, decimals: int = 0) -> str:
    """
    Format a floor area in square metres.

    Args:
        value: Area in m².
        decimals: Number of decimal places.

    Returns:
        Formatted area string.
    """
    return f"{value:.{decimals}f} m²"
