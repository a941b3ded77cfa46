r"""An engine that runs einsum programs with PyTorch.

Rather than looping, every axis variable is an ``arange`` tensor laid out
along its own dimension, so that lookups and products are evaluated for many
index combinations at once by broadcasting. Output axes come first, in loop
order, followed by the summed axes; summed axes are kept as singleton
dimensions after they are reduced, which makes flattening the output axes in
order equivalent to flattening nested vectors in row-major order.

To keep memory usage in check, each reduction is evaluated over "blocks" of
its range of bounded size, and the partial sums are added together.
"""

import functools
import logging
import typing

import torch

from .engine import Engine
from .exceptions import EngineError
from .expression import (
    Flatten,
    Lookup,
    Loop,
    Product,
    Program,
    Reduce,
    Singleton
)
from .utils import get_torch_dtype

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 16
DEFAULT_CACHE_SIZE = 128

def get_axes(node) -> typing.List[typing.Tuple[str, int]]:
    r"""List the ``(label, size)`` pairs bound in a program body: loop
    variables from the outside in, then reduction variables from the outside
    in."""
    loops = []
    reductions = []
    while True:
        if isinstance(node, Loop):
            loops.append((node.label, node.size))
        elif isinstance(node, Reduce):
            reductions.append((node.label, node.size))
        elif not isinstance(node, (Flatten, Singleton)):
            break
        node = node.body
    return loops + reductions

def generate_slices(total_size, block_size):
    lo = 0
    while lo < total_size:
        hi = min(lo + block_size, total_size)
        yield slice(lo, hi)
        lo = hi

def add_in_place(a, b):
    a.add_(b)

class CompiledProgram:
    r"""A program prepared for :py:class:`TorchEngine`.

    Calling it with one flat tensor per parameter evaluates the program.
    """

    def __init__(self, program: Program, block_size: int):
        self.program = program
        self.block_size = block_size
        self.dtype = get_torch_dtype(program.dtype)
        self.axes = get_axes(program.body)
        self.positions = {
            label : i for i, (label, size) in enumerate(self.axes)
        }

    def __call__(self, *inputs: torch.Tensor) -> torch.Tensor:
        params = dict(zip(self.program.params, inputs))
        device = inputs[0].device
        variables = {}
        for label, size in self.axes:
            variables[label] = self.index_range(label, 0, size, device)
        result = self.evaluate(self.program.body, params, variables)
        return result.reshape(-1)

    def index_range(self, label, start, stop, device):
        view = [1] * len(self.axes)
        view[self.positions[label]] = stop - start
        return torch.arange(start, stop, device=device).view(view)

    def evaluate(self, node, params, variables):
        if isinstance(node, Lookup):
            index = sum(
                variables[label] * stride
                for label, stride in node.formula.terms)
            return params[node.param][index]
        elif isinstance(node, Product):
            factors = [
                self.evaluate(factor, params, variables)
                for factor in node.factors
            ]
            return functools.reduce(lambda a, b: a * b, factors)
        elif isinstance(node, Reduce):
            return self.evaluate_reduce(node, params, variables)
        elif isinstance(node, Loop):
            sizes = [-1] * len(self.axes)
            sizes[self.positions[node.label]] = node.size
            return self.evaluate(node.body, params, variables).expand(sizes)
        elif isinstance(node, Flatten):
            return torch.flatten(
                self.evaluate(node.body, params, variables), 0, 1)
        elif isinstance(node, Singleton):
            return self.evaluate(node.body, params, variables).reshape(1)
        else:
            raise TypeError(f'cannot evaluate node {node!r}')

    def evaluate_reduce(self, node, params, variables):
        dim = self.positions[node.label]
        device = variables[node.label].device
        # An empty range still produces one (empty) block, so that the sum
        # has the right shape.
        blocks = list(generate_slices(node.size, self.block_size)) or [slice(0, 0)]
        result = None
        for block in blocks:
            block_variables = dict(variables)
            block_variables[node.label] = self.index_range(
                node.label, block.start, block.stop, device)
            term = self.evaluate(node.body, params, block_variables)
            term = torch.sum(term, dim=dim, keepdim=True, dtype=self.dtype)
            if result is None:
                result = term
            else:
                add_in_place(result, term)
        return result

class TorchEngine(Engine):
    r"""Runs einsum programs on PyTorch tensors.

    Compiled programs are cached, up to ``cache_size`` of them. One engine
    can be shared by several threads.
    """

    def __init__(self,
            block_size: int=DEFAULT_BLOCK_SIZE,
            cache_size: typing.Optional[int]=DEFAULT_CACHE_SIZE):
        """
        :param block_size: Each reduction is done over "blocks" of its range
            of at most this size. Higher values are faster and use more
            memory. With ``n`` nested reductions, the intermediate tensors
            are proportional to ``block_size ** n`` times the output size.
        :param cache_size: Maximum number of compiled programs to keep.
            ``None`` means no limit.
        """
        super().__init__()
        if not isinstance(block_size, int) or block_size < 1:
            raise ValueError(f'block_size must be a positive int: {block_size!r}')
        self.block_size = block_size
        self._compile_cached = functools.lru_cache(maxsize=cache_size)(
            self._compile)

    def compile(self, program: Program) -> CompiledProgram:
        return self._compile_cached(program)

    def _compile(self, program):
        logger.debug('compiling program %r', program)
        return CompiledProgram(program, self.block_size)

    def run(self,
            module: CompiledProgram,
            inputs: typing.Sequence[torch.Tensor]
        ) -> torch.Tensor:
        program = module.program
        if len(inputs) != len(program.params):
            raise EngineError(
                'program takes {} arguments, but {} were given'.format(
                    len(program.params), len(inputs)))
        for param, value in zip(program.params, inputs):
            if value.dim() != 1:
                raise EngineError(
                    f'argument {param} must be a flat vector, but it has '
                    f'shape {list(value.size())}')
            if value.dtype != module.dtype:
                raise EngineError(
                    f'argument {param} has dtype {value.dtype}, but the '
                    f'program expects {module.dtype}')
        try:
            return module(*inputs)
        except (RuntimeError, IndexError) as e:
            raise EngineError(f'failed to run program: {e}') from e
