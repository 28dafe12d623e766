"""
Sandboxed Lua runtime for user-supplied path formulas.

Provides a locked-down Lua execution environment (no io, os, debug,
require, python bridge, etc.) that only evaluates expressions accepted by
the formula grammar.
"""

from coil.lua.formula import (
    FormulaError,
    FormulaSandbox,
    Formula,
    tokenize,
    to_lua_expression,
)

__all__ = ['FormulaError', 'FormulaSandbox', 'Formula', 'tokenize', 'to_lua_expression']
