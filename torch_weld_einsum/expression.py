r"""Expression trees for generated einsum programs.

A program is built from a handful of node types that mirror the loop
constructs of the target language: lookups into flat buffers, products,
additive reductions over a range, appending loops over a range, and
flattening of nested vectors. Renderers in :py:mod:`.weld` and
:py:mod:`.torch_engine` turn a tree into program text.
"""

import typing

class Node:

    _fields = ()

    def _values(self):
        return tuple(getattr(self, name) for name in self._fields)

    def __eq__(self, other):
        return type(self) is type(other) and self._values() == other._values()

    def __hash__(self):
        return hash((type(self).__name__,) + self._values())

    def __repr__(self):
        args = ', '.join(repr(v) for v in self._values())
        return f'{type(self).__name__}({args})'

class IndexFormula(Node):
    r"""The row-major offset of an element in a flat buffer, expressed as a
    sum of ``label * stride`` terms."""

    _fields = ('terms',)

    def __init__(self, terms: typing.Sequence[typing.Tuple[str, int]]):
        self.terms = tuple(terms)

    def labels(self):
        return [label for label, stride in self.terms]

class Lookup(Node):
    r"""Read one element of parameter ``param`` at ``formula``."""

    _fields = ('param', 'formula')

    def __init__(self, param: str, formula: IndexFormula):
        self.param = param
        self.formula = formula

class Product(Node):

    _fields = ('factors',)

    def __init__(self, factors: typing.Sequence[Node]):
        self.factors = tuple(factors)

class Reduce(Node):
    r"""Sum ``body`` over ``label`` in ``range(size)`` into an accumulator
    of type ``dtype``."""

    _fields = ('label', 'size', 'dtype', 'body')

    def __init__(self, label: str, size: int, dtype: str, body: Node):
        self.label = label
        self.size = size
        self.dtype = dtype
        self.body = body

class Loop(Node):
    r"""Collect ``body`` for each ``label`` in ``range(size)`` into a vector
    whose elements have type ``element_type``."""

    _fields = ('label', 'size', 'element_type', 'body')

    def __init__(self, label: str, size: int, element_type: str, body: Node):
        self.label = label
        self.size = size
        self.element_type = element_type
        self.body = body

class Flatten(Node):
    r"""Concatenate the elements of a vector of vectors."""

    _fields = ('body',)

    def __init__(self, body: Node):
        self.body = body

class Singleton(Node):
    r"""A vector holding the single scalar ``body``."""

    _fields = ('dtype', 'body')

    def __init__(self, dtype: str, body: Node):
        self.dtype = dtype
        self.body = body

class Program(Node):
    r"""A function of one flat vector per parameter that returns a flat
    vector of ``dtype``."""

    _fields = ('params', 'dtype', 'body')

    def __init__(self, params: typing.Sequence[str], dtype: str, body: Node):
        self.params = tuple(params)
        self.dtype = dtype
        self.body = body

def vector_type(element_type: str) -> str:
    return f'vec[{element_type}]'
