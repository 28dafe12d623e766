"""
Sandboxed path formulas.

User-entered path formulas (x(t), y(t)) are never executed as Python. They
are first checked against a small expression grammar and then compiled in a
locked-down Lua runtime that exposes nothing but a handful of math functions.

Grammar (tokens accepted, anything else is rejected):
    numbers         1, 2.5, .5, 1e3
    variables       t, width, height
    constants       pi
    functions       sin cos tan asin acos atan sqrt abs exp log floor ceil min max
    operators       + - * / % ^ **   (** is an alias for ^, i.e. power)
    punctuation     ( ) ,

Usage:
    sandbox = FormulaSandbox()
    fx = sandbox.compile("200 * cos(t) * (1 - t / 12.5)", name='x')
    fx(1.0, 800, 600)  # -> float
"""

import math
import re
from typing import Callable, List, Tuple

from lupa import LuaError, LuaRuntime

from coil.logging import get_logger

log = get_logger('formula')

# (t, width, height) -> value
Formula = Callable[[float, float, float], float]

VARIABLES = ('t', 'width', 'height')
CONSTANTS = ('pi',)
FUNCTIONS = (
    'sin', 'cos', 'tan', 'asin', 'acos', 'atan',
    'sqrt', 'abs', 'exp', 'log', 'floor', 'ceil', 'min', 'max',
)

_TOKEN_RE = re.compile(r"""
    (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>\*\*|[-+*/%^(),])
  | (?P<space>\s+)
""", re.VERBOSE)

MAX_FORMULA_LENGTH = 500


class FormulaError(ValueError):
    """Raised when a formula is rejected or fails to evaluate."""
    pass


def tokenize(source: str) -> List[Tuple[str, str]]:
    """Split a formula into (kind, text) tokens.

    Whitespace is dropped. Any character outside the grammar is an error.

    Raises:
        FormulaError: On an unexpected character
    """
    tokens = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if not match:
            raise FormulaError(f"Unexpected character {source[pos]!r} at position {pos}")
        kind = match.lastgroup
        if kind != 'space':
            tokens.append((kind, match.group()))
        pos = match.end()
    return tokens


def to_lua_expression(source: str) -> str:
    """Validate a formula and translate it to a Lua expression.

    Args:
        source: Formula text

    Returns:
        Equivalent Lua expression text

    Raises:
        FormulaError: If the formula is empty, too long, uses an unknown
            name, misuses a function name or has unbalanced parentheses
    """
    if not source or not source.strip():
        raise FormulaError("Formula is empty")
    if len(source) > MAX_FORMULA_LENGTH:
        raise FormulaError(f"Formula longer than {MAX_FORMULA_LENGTH} characters")

    tokens = tokenize(source)
    parts = []
    depth = 0

    for i, (kind, text) in enumerate(tokens):
        next_text = tokens[i + 1][1] if i + 1 < len(tokens) else None

        if kind == 'name':
            if text in FUNCTIONS:
                if next_text != '(':
                    raise FormulaError(f"Function '{text}' must be called, e.g. {text}(t)")
            elif text in VARIABLES or text in CONSTANTS:
                if next_text == '(':
                    raise FormulaError(f"'{text}' is not a function")
            else:
                raise FormulaError(f"Unknown name '{text}'")
            parts.append(text)
        elif kind == 'op':
            if text == '(':
                depth += 1
            elif text == ')':
                depth -= 1
                if depth < 0:
                    raise FormulaError("Unbalanced ')'")
            parts.append('^' if text == '**' else text)
        else:
            parts.append(text)

    if depth != 0:
        raise FormulaError("Unbalanced '('")

    return ' '.join(parts)


class FormulaSandbox:
    """
    Locked-down Lua runtime for evaluating path formulas.

    All default Lua globals are removed; only the grammar's math functions
    and pi are reinstalled. Compiled formulas are plain Lua closures over
    (t, width, height).
    """

    # Globals that must never be reachable from a formula
    _CRITICAL_ESCAPES = (
        'python', '_python', 'ffi', 'jit', 'load', 'loadstring', 'loadfile',
        'dofile', 'require', 'package', 'debug', 'getmetatable',
        'setmetatable', 'rawget', 'rawset', '_G', 'io', 'os', 'string',
        'coroutine', 'collectgarbage',
    )

    def __init__(self):
        # register_eval/register_builtins=False: no python.eval / python.builtins
        self._lua = LuaRuntime(
            register_eval=False,
            register_builtins=False,
            unpack_returned_tuples=True,
        )
        self._setup_lua_environment()

    def _setup_lua_environment(self) -> None:
        """Clear every global, then install only the formula functions."""
        g = self._lua.globals()
        lua_math = g.math

        safe_globals = {name: lua_math[name] for name in FUNCTIONS}
        safe_globals['pi'] = lua_math.pi

        for key in list(g.keys()):
            g[key] = None

        for key, value in safe_globals.items():
            g[key] = value

        self._validate_sandbox()

    def _validate_sandbox(self) -> None:
        """Refuse to run if any escape hatch survived the cleanup."""
        exposed = [name for name in self._CRITICAL_ESCAPES
                   if self._lua.eval(f'{name} ~= nil')]
        if exposed:
            raise RuntimeError(
                f"Formula sandbox validation failed, exposed globals: {', '.join(exposed)}"
            )

    def compile(self, source: str, name: str = 'formula') -> Formula:
        """Compile a formula into a callable f(t, width, height) -> float.

        Raises:
            FormulaError: If the formula is rejected by the grammar or fails
                to compile
        """
        try:
            expression = to_lua_expression(source)
        except FormulaError:
            log.formula(name, source, action='reject')
            raise

        code = f"return function(t, width, height) return ({expression}) end"
        try:
            lua_fn = self._lua.execute(code)
        except LuaError as e:
            log.formula(name, source, action='reject')
            raise FormulaError(f"Invalid formula for {name}: {e}") from e

        log.formula(name, source)

        def evaluate(t: float, width: float, height: float) -> float:
            try:
                value = lua_fn(float(t), float(width), float(height))
            except LuaError as e:
                raise FormulaError(f"Error evaluating {name} at t={t}: {e}") from e
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise FormulaError(f"Formula {name} produced a non-number: {value!r}")
            return float(value)

        return evaluate


def frange(start: float, stop: float, step: float) -> List[float]:
    """Inclusive float range without accumulating rounding error."""
    if step <= 0:
        raise ValueError(f"Step must be positive, got {step}")
    count = int(math.floor((stop - start) / step + 1e-9))
    return [start + i * step for i in range(count + 1)]
