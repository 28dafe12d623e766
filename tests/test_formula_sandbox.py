"""
Formula Sandbox Security Tests

These tests verify that path formulas can only reach the math functions
the formula grammar allows. If any of these tests fail, it indicates a
potential security regression.

Run with: pytest tests/test_formula_sandbox.py -v
"""
import math

import pytest

from coil.lua import FormulaError, FormulaSandbox, to_lua_expression, tokenize
from coil.lua.formula import FUNCTIONS, MAX_FORMULA_LENGTH, frange


@pytest.fixture(scope='module')
def sandbox():
    return FormulaSandbox()


@pytest.fixture
def lua(sandbox):
    """Get the Lua runtime from the sandbox."""
    return sandbox._lua


class TestBlockedGlobals:
    """Test that dangerous Lua globals are not accessible."""

    @pytest.mark.parametrize("global_name", [
        "io",
        "os",
        "debug",
        "package",
        "python",       # Lupa's Python bridge - critical to block
        "_python",      # Alternative Lupa bridge name
        "ffi",          # LuaJIT FFI
        "jit",          # LuaJIT control
        "string",
        "table",
        "coroutine",
        "math",         # Only selected math functions are reinstalled
        "_G",
    ])
    def test_dangerous_library_is_nil(self, lua, global_name):
        """Dangerous standard libraries should be nil."""
        assert lua.eval(global_name) is None, f"{global_name} should be nil"

    @pytest.mark.parametrize("func_name", [
        "loadfile",
        "dofile",
        "require",
        "load",
        "loadstring",
        "getmetatable",
        "setmetatable",
        "rawget",
        "rawset",
        "collectgarbage",
        "print",
        "pairs",
        "pcall",
    ])
    def test_dangerous_function_is_nil(self, lua, func_name):
        """Dangerous functions should be nil."""
        assert lua.eval(func_name) is None, f"{func_name} should be nil"

    @pytest.mark.parametrize("func_name", FUNCTIONS)
    def test_math_function_available(self, lua, func_name):
        assert lua.eval(func_name) is not None

    def test_pi_available(self, lua):
        assert lua.eval("pi") == pytest.approx(math.pi)


class TestGrammar:
    """Test the formula grammar check that runs before Lua sees anything."""

    def test_tokenize(self):
        assert tokenize("2**t + .5") == [
            ('number', '2'), ('op', '**'), ('name', 't'), ('op', '+'), ('number', '.5'),
        ]

    def test_power_alias(self):
        assert to_lua_expression("2 ** t") == "2 ^ t"

    @pytest.mark.parametrize("source", [
        "",
        "   ",
        "t; os.exit()",
        "print(t)",
        "x",
        "sin",
        "t(1)",
        "(t",
        "t)",
        "'text'",
        "t == 1",
        "t .. t",
        "[[t]]",
    ])
    def test_rejected(self, sandbox, source):
        with pytest.raises(FormulaError):
            sandbox.compile(source)

    def test_too_long(self, sandbox):
        source = "t" + " + t" * MAX_FORMULA_LENGTH
        with pytest.raises(FormulaError, match="longer than"):
            sandbox.compile(source)

    @pytest.mark.parametrize("source", ["t, t", "()", "t t", "* t"])
    def test_lua_syntax_error_is_formula_error(self, sandbox, source):
        with pytest.raises(FormulaError):
            sandbox.compile(source)


class TestEvaluation:
    """Test compiled formulas."""

    @pytest.mark.parametrize("source,expected", [
        ("2 ** 3", 8.0),
        ("2 ^ 3", 8.0),
        ("7 / 2", 3.5),
        ("10 % 3", 1.0),
        ("-t", -1.0),
        ("sin(pi / 2)", 1.0),
        ("max(t, width, height)", 800.0),
        ("min(width, height) / 2 - 40", 260.0),
        ("1e2 * t", 100.0),
    ])
    def test_values(self, sandbox, source, expected):
        assert sandbox.compile(source)(1.0, 800, 600) == pytest.approx(expected)

    def test_result_is_float(self, sandbox):
        assert isinstance(sandbox.compile("1 + 1")(0, 800, 600), float)

    def test_division_by_zero_is_infinite(self, sandbox):
        assert math.isinf(sandbox.compile("t / 0")(1.0, 800, 600))

    def test_runtime_error_is_formula_error(self, sandbox):
        fn = sandbox.compile("min()")
        with pytest.raises(FormulaError):
            fn(0.0, 800, 600)

    def test_formulas_are_independent(self, sandbox):
        fx = sandbox.compile("t * 2", name='x')
        fy = sandbox.compile("t * 3", name='y')
        assert fx(2.0, 0, 0) == 4.0
        assert fy(2.0, 0, 0) == 6.0


class TestFrange:
    """Test inclusive float ranges used for sampling t."""

    def test_inclusive(self):
        assert frange(0.0, 1.0, 0.25) == [0.0, 0.25, 0.5, 0.75, 1.0]

    def test_no_drift(self):
        values = frange(0.0, 12.5, 0.01)
        assert len(values) == 1251
        assert values[-1] == pytest.approx(12.5)

    def test_bad_step(self):
        with pytest.raises(ValueError):
            frange(0.0, 1.0, 0.0)
