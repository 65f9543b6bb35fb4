"""
Tests for the Blisp builtin catalog
"""

import pytest
import main
from interpreter import create_builtin_env, create_interpreter
from stdlib import (
  builtin_cons, builtin_eval, builtin_head, builtin_init, builtin_join,
  builtin_len, builtin_list, builtin_op, builtin_tail,
  truncating_div, truncating_mod
)
from values import Error, Expr, Number, Quoted, Symbol


def q(*xs):
  return Quoted([Number(x) if isinstance(x, int) else x for x in xs])


def args(*values):
  return Expr(list(values))


@pytest.fixture
def env():
  return create_builtin_env()


@pytest.fixture
def interpreter():
  return create_interpreter()


class TestListBuiltins:
  """Direct calls with already-evaluated arguments"""

  def test_list_relabels(self, env):
    assert builtin_list(env, args(Number(1), Symbol("x"))) == Quoted([Number(1), Symbol("x")])

  def test_list_empty(self, env):
    assert builtin_list(env, args()) == Quoted()

  def test_head(self, env):
    assert builtin_head(env, args(q(1, 2, 3))) == q(1)

  def test_tail(self, env):
    assert builtin_tail(env, args(q(1, 2, 3))) == q(2, 3)

  def test_tail_single(self, env):
    assert builtin_tail(env, args(q(1))) == q()

  def test_init(self, env):
    assert builtin_init(env, args(q(1, 2, 3))) == q(1, 2)

  def test_join(self, env):
    assert builtin_join(env, args(q(1, 2), q(3), q())) == q(1, 2, 3)

  def test_join_single(self, env):
    assert builtin_join(env, args(q(1))) == q(1)

  def test_cons(self, env):
    assert builtin_cons(env, args(Number(0), q(1, 2))) == q(0, 1, 2)

  def test_cons_list_onto_list(self, env):
    assert builtin_cons(env, args(q(1), q(2))) == Quoted([q(1), Number(2)])

  def test_len(self, env):
    assert builtin_len(env, args(q(1, 2, 3))) == Number(3)
    assert builtin_len(env, args(q())) == Number(0)

  def test_eval(self, env):
    code = Quoted([Symbol("+"), Number(1), Number(2)])
    assert builtin_eval(env, args(code)) == Number(3)

  def test_eval_empty(self, env):
    assert builtin_eval(env, args(q())) == Expr()

  def test_builtin_consumes_arguments(self, env):
    a = args(q(1, 2, 3))
    builtin_head(env, a)
    assert a.cells == []


class TestListPreconditions:
  """Every builtin validates before it touches its arguments"""

  @pytest.mark.parametrize("builtin,name", [
      (builtin_head, "head"),
      (builtin_tail, "tail"),
      (builtin_init, "init"),
  ])
  def test_empty_list(self, env, builtin, name):
    assert builtin(env, args(q())) == Error(f"Function '{name}' passed {{}}!")

  @pytest.mark.parametrize("builtin,name", [
      (builtin_head, "head"),
      (builtin_tail, "tail"),
      (builtin_init, "init"),
      (builtin_len, "len"),
      (builtin_eval, "eval"),
  ])
  def test_too_many_arguments(self, env, builtin, name):
    result = builtin(env, args(q(1), q(2)))
    assert result == Error(f"Function '{name}' passed too many arguments! Got 2, expected 1.")

  @pytest.mark.parametrize("builtin,name", [
      (builtin_head, "head"),
      (builtin_tail, "tail"),
      (builtin_len, "len"),
  ])
  def test_too_few_arguments(self, env, builtin, name):
    result = builtin(env, args())
    assert result == Error(f"Function '{name}' passed too few arguments! Got 0, expected 1.")

  def test_wrong_type(self, env):
    result = builtin_head(env, args(Number(1)))
    assert result == Error(
        "Function 'head' passed incorrect type for argument 1! Got Number, expected Q-Expression."
    )

  def test_wrong_type_reported_before_empty(self, env):
    result = builtin_tail(env, args(Expr()))
    assert "incorrect type" in result.message

  def test_join_wrong_type(self, env):
    result = builtin_join(env, args(q(1), Number(2)))
    assert result == Error(
        "Function 'join' passed incorrect type for argument 2! Got Number, expected Q-Expression."
    )

  def test_join_without_arguments(self, env):
    assert "too few" in builtin_join(env, args()).message

  def test_cons_second_must_be_list(self, env):
    result = builtin_cons(env, args(Number(1), Number(2)))
    assert result == Error(
        "Function 'cons' passed incorrect type for argument 2! Got Number, expected Q-Expression."
    )

  def test_cons_arity(self, env):
    assert "too many" in builtin_cons(env, args(Number(1), q(), q())).message
    assert "too few" in builtin_cons(env, args(Number(1))).message

  def test_failed_call_leaves_arguments_untouched(self, env):
    a = args(q(), q(1))
    builtin_join(env, args(q(1), Number(2)))
    builtin_head(env, a)
    assert a.cells == [q(), q(1)]


class TestArithmetic:
  """Arithmetic through the evaluator"""

  @pytest.mark.parametrize("code,expected", [
      ("+ 1 2 3", 6),
      ("- 10 3 2", 5),
      ("- 5", -5),
      ("(- 5)", -5),
      ("* 2 3 4", 24),
      ("/ 7 2", 3),
      ("/ -7 2", -3),
      ("/ 7 -2", -3),
      ("% 7 3", 1),
      ("% -7 2", -1),
      ("% 7 -2", 1),
      ("^ 2 10", 1024),
      ("^ 5 0", 1),
      ("max 1 5 3", 5),
      ("min 4 2 8", 2),
      ("+ 7", 7),
      ("* 3", 3),
      ("add 1 2", 3),
      ("sub 5", -5),
      ("sub 5 1", 4),
      ("mul 2 3", 6),
      ("div 9 3", 3),
      ("mod 9 4", 1),
      ("pow 3 3", 27),
      ("+ 1 (* 2 3)", 7),
  ])
  def test_arithmetic(self, interpreter, code, expected):
    assert interpreter.run(code) == Number(expected)

  def test_division_by_zero(self, interpreter):
    assert interpreter.run("/ 4 0") == Error("Division By Zero!")
    assert interpreter.run("div 4 0") == Error("Division By Zero!")

  def test_modulo_by_zero(self, interpreter):
    assert interpreter.run("% 4 0") == Error("Division By Zero!")

  def test_division_by_zero_after_first_step(self, interpreter):
    assert interpreter.run("/ 100 5 0 2") == Error("Division By Zero!")

  def test_negative_exponent(self, interpreter):
    assert interpreter.run("^ 2 -1") == Error("Negative exponent!")

  def test_non_number(self, interpreter):
    assert interpreter.run("+ 1 {2}") == Error("Cannot operate on non-number!")

  def test_max_tie_keeps_value(self, interpreter):
    assert interpreter.run("max 3 3 1") == Number(3)
    assert interpreter.run("min 2 2 5") == Number(2)

  def test_max_min_negative(self, interpreter):
    assert interpreter.run("max -3 -7") == Number(-3)
    assert interpreter.run("min -3 -7") == Number(-7)

  def test_no_arguments(self, env):
    assert builtin_op(env, args(), "+") == Error(
        "Function '+' passed too few arguments! Got 0, expected 1."
    )

  @pytest.mark.parametrize("code", [
      "* 9223372036854775807 2",
      "+ 9223372036854775807 1",
      "- -9223372036854775808 1",
      "- -9223372036854775808",
      "/ -9223372036854775808 -1",
      "^ 2 63",
      "^ 10 5000",
      "^ 10 1000000000",
      "pow 3 100",
  ])
  def test_integer_overflow(self, interpreter, code):
    assert interpreter.run(code) == Error("Integer overflow!")

  def test_overflow_stops_fold(self, interpreter):
    assert interpreter.run("+ 9223372036854775807 1 -1") == Error("Integer overflow!")

  @pytest.mark.parametrize("code,expected", [
      ("^ 2 62", 4611686018427387904),
      ("^ -2 63", -9223372036854775808),
      ("^ 1 1000000000", 1),
      ("^ -1 1000000001", -1),
      ("^ 0 1000000000", 0),
      ("+ 9223372036854775806 1", 9223372036854775807),
      ("- -9223372036854775807", 9223372036854775807),
  ])
  def test_results_at_range_limits(self, interpreter, code, expected):
    assert interpreter.run(code) == Number(expected)

  def test_overflow_renders_in_cli(self, capsys):
    assert main.main(["-e", "^ 10 5000"]) == 0
    assert capsys.readouterr().out == "Error: Integer overflow!\n"


class TestIntegerHelpers:

  @pytest.mark.parametrize("x,y,q_expected,r_expected", [
      (7, 2, 3, 1),
      (-7, 2, -3, -1),
      (7, -2, -3, 1),
      (-7, -2, 3, -1),
      (6, 3, 2, 0),
  ])
  def test_truncation(self, x, y, q_expected, r_expected):
    assert truncating_div(x, y) == q_expected
    assert truncating_mod(x, y) == r_expected
