class EinsumError(Exception):
    r"""Base class for errors raised by this package."""

class MalformedEquationError(EinsumError, ValueError):
    r"""The equation string is not valid einsum syntax, or it does not agree
    with the number of operands."""

class ShapeMismatchError(EinsumError, ValueError):
    r"""An operand's shape does not agree with its term in the equation."""

class InconsistentDimensionError(ShapeMismatchError):
    r"""The same axis label was given two different sizes."""

class UnsupportedDtypeError(EinsumError, TypeError):
    r"""An operand has a dtype that has no element type in generated
    programs."""

class EngineError(EinsumError, RuntimeError):
    r"""The execution engine failed to compile or run a program."""
