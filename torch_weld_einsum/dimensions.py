import typing

from .equation import Equation
from .exceptions import ShapeMismatchError, InconsistentDimensionError

def resolve_dimensions(
        equation: Equation,
        shapes: typing.Sequence[typing.Sequence[int]],
        check_consistency: bool=True
    ) -> typing.Dict[str, int]:
    r"""Map every axis label in ``equation`` to its size.

    :param equation: A parsed equation.
    :param shapes: The shape of each operand.
    :param check_consistency: If true, a label that is given two different
        sizes is an error. If false, the size seen last wins.
    :return: A dict mapping labels to sizes.
    """
    if len(shapes) != len(equation.input_terms):
        raise ShapeMismatchError(
            'equation {!r} expects {} operands, but {} shapes were '
            'given'.format(
                equation.source, len(equation.input_terms), len(shapes)))
    dims = {}
    # Remember where each size came from for the error message.
    origins = {}
    for arg_no, (term, shape) in enumerate(zip(equation.input_terms, shapes)):
        shape = tuple(shape)
        if len(term) != len(shape):
            raise ShapeMismatchError(
                'term {!r} of argument {} has {} axes, but the argument has '
                'shape {}'.format(term, arg_no, len(term), list(shape)))
        for dim_no, (label, size) in enumerate(zip(term, shape)):
            if check_consistency and label in dims and dims[label] != size:
                prev_arg_no, prev_dim_no = origins[label]
                raise InconsistentDimensionError(
                    'dimension {} of argument {} (label {!r}) has size {}, '
                    'but dimension {} of argument {} has size {}'.format(
                        dim_no, arg_no, label, size,
                        prev_dim_no, prev_arg_no, dims[label]))
            dims[label] = size
            origins[label] = (arg_no, dim_no)
    return dims

def get_output_shape(
        equation: Equation,
        dims: typing.Mapping[str, int]
    ) -> typing.List[int]:
    r"""Compute the shape of the output of ``equation``.

    A scalar output is stored as a one-element array, so its shape is
    ``[1]``.
    """
    if not equation.output_term:
        return [1]
    return [dims[label] for label in equation.output_term]
