import functools
import logging
import typing

import torch

from .compiler import compile_program
from .dimensions import resolve_dimensions
from .engine import Engine, evaluate
from .equation import Equation, EquationParser
from .expression import Program
from .torch_engine import DEFAULT_CACHE_SIZE, TorchEngine
from .utils import get_dtype_tag
from .weld import render_weld

logger = logging.getLogger(__name__)

class EinsumCompiler:
    r"""Compiles einsum equations into programs, caching the results.

    Create one compiler and pass it to :py:func:`einsum` to reuse compiled
    programs across calls. The cache is keyed by the equation text, the
    operand shapes, and the element type, so it never changes the result of
    a call. A compiler can be shared between threads.
    """

    def __init__(self,
            parser: typing.Optional[EquationParser]=None,
            check_consistency: bool=True,
            cache_size: typing.Optional[int]=DEFAULT_CACHE_SIZE):
        """
        :param parser: Parser used for equations. A new one is created if
            not given.
        :param check_consistency: If true, a label that is bound to two
            different sizes raises
            :py:class:`~torch_weld_einsum.InconsistentDimensionError`. If
            false, the size seen last is used.
        :param cache_size: Maximum number of compiled programs to keep.
            ``None`` means no limit.
        """
        super().__init__()
        self.parser = parser if parser is not None else EquationParser()
        self.check_consistency = check_consistency
        self._compile_cached = functools.lru_cache(maxsize=cache_size)(
            self._compile)

    def parse(self, equation: str, num_operands: int) -> Equation:
        return self.parser.parse(equation, num_operands)

    def compile(self,
            equation: str,
            operands: typing.Sequence[torch.Tensor]
        ) -> typing.Tuple[Program, typing.List[int]]:
        r"""Compile ``equation`` for operands like ``operands``.

        :return: The program and the shape of its output.
        """
        parsed = self.parse(equation, len(operands))
        shapes = tuple(tuple(operand.size()) for operand in operands)
        dtype = get_dtype_tag(operands[0].dtype)
        return self._compile_cached(parsed, shapes, dtype)

    def _compile(self, parsed, shapes, dtype):
        logger.debug('compiling %r for shapes %r', parsed.source, shapes)
        dims = resolve_dimensions(parsed, shapes, self.check_consistency)
        return compile_program(parsed, dims, dtype)

def einsum(
        equation: str,
        *operands: torch.Tensor,
        compiler: typing.Optional[EinsumCompiler]=None,
        engine: typing.Optional[Engine]=None
    ) -> torch.Tensor:
    r"""Evaluate an einsum equation.

    The equation is compiled into a loop program, which is then run by
    ``engine``. For example, ``einsum('ik,kj->ij', A, B)`` computes the
    matrix product of ``A`` and ``B``. An equation with an empty output term
    produces a tensor of shape ``(1,)``.

    All validation happens before the engine is invoked.

    :param equation: An equation of the form ``ab,bc->ac``. Only lowercase
        letters are allowed as labels, and the output term is required.
    :param operands: Input tensors, one per input term. The dtype of the
        first operand is the dtype of the result.
    :param compiler: Compiler to use. A new one is created for this call if
        not given.
    :param engine: Engine to run the program with. Defaults to a new
        :py:class:`~torch_weld_einsum.TorchEngine`.
    :return: Output of einsum.
    """
    for operand in operands:
        if not isinstance(operand, torch.Tensor):
            raise TypeError(
                f'operands must be tensors, not {type(operand).__name__}')
    if compiler is None:
        compiler = EinsumCompiler()
    if engine is None:
        engine = TorchEngine()
    program, output_shape = compiler.compile(equation, operands)
    return evaluate(program, output_shape, operands, engine)

def generate_code(
        equation: str,
        operands: typing.Sequence[torch.Tensor],
        parser: typing.Optional[EquationParser]=None
    ) -> typing.Tuple[str, typing.List[int]]:
    r"""Compile an equation into Weld code.

    :return: The text of the Weld function and the shape of its output.
    """
    compiler = EinsumCompiler(parser=parser)
    program, output_shape = compiler.compile(equation, operands)
    return render_weld(program), output_shape
