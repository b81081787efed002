import math

def format_currency(value: float, symbol: str = "R$") -> str:
    """
    Render an amount with two decimals and a decimal comma.

    Example:
        format_currency(1000) -> "R$ 1000,00"
        format_currency(-12.5) -> "R$ -12,50"
    """
    if math.isnan(value):
        return f"{symbol} --"
    number = f"{value:.2f}".replace(".", ",")
    return f"{symbol} {number}"


def format_signed(value: float, negative: bool, symbol: str = "R$") -> str:
    """Amount prefixed with + or - as shown in the transaction list"""
    sign = "-" if negative else "+"
    return f"{sign} {format_currency(value, symbol)}"
