from .compiler import compile_program, index_formula
from .derived import (
    tensordot,
    inner,
    dot,
    mm,
    bmm,
    mv,
    outer,
    trace,
    diagonal,
    transpose
)
from .dimensions import resolve_dimensions, get_output_shape
from .einsum import einsum, EinsumCompiler, generate_code
from .engine import Engine, evaluate
from .equation import compile_equation, Equation, EquationParser
from .exceptions import (
    EinsumError,
    MalformedEquationError,
    ShapeMismatchError,
    InconsistentDimensionError,
    UnsupportedDtypeError,
    EngineError
)
from .expression import (
    IndexFormula,
    Lookup,
    Product,
    Reduce,
    Loop,
    Flatten,
    Singleton,
    Program
)
from .torch_engine import TorchEngine
from .weld import render_weld

__all__ = [
    'einsum',
    'EinsumCompiler',
    'generate_code',
    'compile_equation',
    'Equation',
    'EquationParser',
    'resolve_dimensions',
    'get_output_shape',
    'compile_program',
    'index_formula',
    'render_weld',
    'Engine',
    'TorchEngine',
    'evaluate',
    'IndexFormula',
    'Lookup',
    'Product',
    'Reduce',
    'Loop',
    'Flatten',
    'Singleton',
    'Program',
    'EinsumError',
    'MalformedEquationError',
    'ShapeMismatchError',
    'InconsistentDimensionError',
    'UnsupportedDtypeError',
    'EngineError',
    'tensordot',
    'inner',
    'dot',
    'mm',
    'bmm',
    'mv',
    'outer',
    'trace',
    'diagonal',
    'transpose'
]
