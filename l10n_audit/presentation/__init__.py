"""
Presentation — Console display for l10n-audit

- Symbols: Visual vocabulary (unicode/ascii) for audit statuses
- safe_print: Encoding-safe output
"""

from .symbols import (
    SymbolSet, get_symbols, symbol_for_status,
    safe_print, truncate,
    UNICODE, ASCII,
)

__all__ = [
    "SymbolSet", "get_symbols", "symbol_for_status",
    "safe_print", "truncate",
    "UNICODE", "ASCII",
]
