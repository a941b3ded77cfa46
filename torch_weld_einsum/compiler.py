import functools
import logging
import typing

from .dimensions import get_output_shape
from .equation import Equation
from .expression import (
    Flatten,
    IndexFormula,
    Lookup,
    Loop,
    Product,
    Program,
    Reduce,
    Singleton,
    vector_type
)

logger = logging.getLogger(__name__)

def param_name(arg_no: int) -> str:
    return f'arg{arg_no}'

def index_formula(term: str, dims: typing.Mapping[str, int]) -> IndexFormula:
    r"""Compute the row-major offset of an element of an operand whose axes
    are labeled by ``term``.

    The stride of the axis at position ``i`` is the product of the sizes of
    the axes after it in ``term``.
    """
    sizes = [dims[label] for label in term]
    terms = []
    for i, label in enumerate(term):
        stride = functools.reduce(lambda a, b: a * b, sizes[i+1:], 1)
        terms.append((label, stride))
    return IndexFormula(terms)

def build_product(equation: Equation, dims: typing.Mapping[str, int]) -> Product:
    return Product([
        Lookup(param_name(arg_no), index_formula(term, dims))
        for arg_no, term in enumerate(equation.input_terms)
    ])

def build_reductions(body, labels, dims, dtype):
    r"""Wrap ``body`` in one reduction per label. The first label becomes the
    outermost reduction."""
    return functools.reduce(
        lambda inner, label: Reduce(label, dims[label], dtype, inner),
        reversed(labels),
        body)

def build_loops(body, labels, dims, dtype):
    r"""Wrap ``body`` in one appending loop per label. The first label
    becomes the outermost loop, and each loop collects the vectors built by
    the loop inside it."""
    element_type = dtype
    for label in reversed(labels):
        body = Loop(label, dims[label], element_type, body)
        element_type = vector_type(element_type)
    return body

def compile_program(
        equation: Equation,
        dims: typing.Mapping[str, int],
        dtype: str
    ) -> typing.Tuple[Program, typing.List[int]]:
    r"""Compile a parsed equation into a program.

    :param equation: A parsed equation.
    :param dims: Size of every label, as returned by
        :py:func:`~torch_weld_einsum.resolve_dimensions`.
    :param dtype: Element type name, e.g. ``'f64'``.
    :return: The program and the shape of its output.
    """
    body = build_product(equation, dims)
    body = build_reductions(body, equation.summation_indices(), dims, dtype)
    output_term = equation.output_term
    if output_term:
        body = build_loops(body, output_term, dims, dtype)
        for _ in range(len(output_term) - 1):
            body = Flatten(body)
    else:
        body = Singleton(dtype, body)
    params = [param_name(i) for i in range(equation.num_operands)]
    output_shape = get_output_shape(equation, dims)
    program = Program(params, dtype, body)
    logger.debug('compiled %r: %r', equation.source, program)
    return program, output_shape
