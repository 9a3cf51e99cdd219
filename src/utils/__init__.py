"""
UAS Bot - Utils Package
=======================

Stateless helpers used across cogs and services.

Available Utilities:
    Footer: Standardized embed footer
    Embeds: Error/success embed builders
    Interaction: safe_respond / safe_defer
    Money: Amount parsing and currency formatting
    Duration: Short duration parsing for timeouts
"""

from .footer import FOOTER_TEXT, init_footer, set_footer, set_casino_footer
from .embeds import build_embed, build_error_embed, build_success_embed
from .interaction import safe_respond, safe_defer
from .money import format_money, format_money_full, format_delta, parse_amount


__all__ = [
    # Footer
    "FOOTER_TEXT",
    "init_footer",
    "set_footer",
    "set_casino_footer",
    # Embeds
    "build_embed",
    "build_error_embed",
    "build_success_embed",
    # Interaction
    "safe_respond",
    "safe_defer",
    # Money
    "format_money",
    "format_money_full",
    "format_delta",
    "parse_amount",
]
