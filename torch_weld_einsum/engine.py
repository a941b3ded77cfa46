import functools
import logging
import typing

import torch

from .exceptions import EngineError
from .expression import Program

logger = logging.getLogger(__name__)

class Engine:
    r"""An execution engine for compiled einsum programs.

    An engine turns a :py:class:`~torch_weld_einsum.Program` into something
    it can run, and runs it on one flat buffer per program parameter.
    Subclasses must report every failure as
    :py:class:`~torch_weld_einsum.EngineError`.
    """

    def compile(self, program: Program) -> typing.Any:
        r"""Compile ``program`` into a module accepted by :py:meth:`run`."""
        raise NotImplementedError

    def run(self,
            module: typing.Any,
            inputs: typing.Sequence[torch.Tensor]
        ) -> torch.Tensor:
        r"""Run a compiled module.

        :param module: A module returned by :py:meth:`compile`.
        :param inputs: One flat buffer per program parameter, in parameter
            order. The engine must not modify them or keep references to
            them after returning.
        :return: A new flat buffer holding the output.
        """
        raise NotImplementedError

def evaluate(
        program: Program,
        output_shape: typing.Sequence[int],
        operands: typing.Sequence[torch.Tensor],
        engine: Engine
    ) -> torch.Tensor:
    r"""Run a compiled program on ``operands`` and shape its output.

    :param program: A compiled program.
    :param output_shape: Shape of the output, as returned by
        :py:func:`~torch_weld_einsum.compile_program`.
    :param operands: Input tensors. Each one is flattened in row-major
        order before being passed to the engine.
    :param engine: The engine that runs the program.
    :return: The output tensor, with shape ``output_shape``.
    """
    inputs = [operand.reshape(-1) for operand in operands]
    logger.debug(
        'evaluating program with %d inputs on %s',
        len(inputs), type(engine).__name__)
    module = engine.compile(program)
    output = engine.run(module, inputs)
    expected_size = functools.reduce(lambda a, b: a * b, output_shape, 1)
    if output.dim() != 1 or output.numel() != expected_size:
        raise EngineError(
            'engine returned {} elements with shape {}, but the output '
            'shape is {}'.format(
                output.numel(), list(output.size()), list(output_shape)))
    return output.reshape(tuple(output_shape))
