"""
Blisp runtime environment
A single global scope mapping symbol names to values. Values are copied in
on put and copied out on get, so callers never share structure with it.
"""

from typing import Callable, Dict, List

from values import Error, Function, Value, copy_value


UNBOUND_SYMBOL = "unbound symbol"


class Environment:
  """Mapping from symbol name to an owned value"""

  def __init__(self, debug: bool = False):
    self.bindings: Dict[str, Value] = {}
    self.debug = debug

  def get(self, name: str) -> Value:
    """Return a copy of the value bound to `name`, or an unbound-symbol error"""
    if name in self.bindings:
      return copy_value(self.bindings[name])
    return Error(UNBOUND_SYMBOL)

  def put(self, name: str, value: Value) -> None:
    """Bind `name` to a copy of `value`, replacing any previous binding"""
    self.bindings[name] = copy_value(value)

  def add_builtin(self, name: str, func: Callable) -> None:
    """Bind `name` to the native function `func`"""
    self.put(name, Function(name, func))

  def names(self) -> List[str]:
    """Bound names in insertion order"""
    return list(self.bindings)

  def __contains__(self, name: str) -> bool:
    return name in self.bindings

  def __len__(self) -> int:
    return len(self.bindings)
