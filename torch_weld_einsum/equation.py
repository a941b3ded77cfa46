import re
import typing

from .exceptions import MalformedEquationError

class Equation:
    r"""A parsed einsum equation.

    :ivar source: The equation text, with surrounding whitespace removed.
    :ivar input_terms: One string of axis labels per operand.
    :ivar output_term: The axis labels of the output, possibly empty.
    """

    def __init__(self, source, input_terms, output_term):
        self.source = source
        self.input_terms = input_terms
        self.output_term = output_term

    @property
    def num_operands(self):
        return len(self.input_terms)

    def labels(self):
        r"""Every label used by the inputs, in order of first appearance."""
        return get_variables_not_in(''.join(self.input_terms), set())

    def summation_indices(self):
        r"""The labels that are summed out, in ascending order."""
        return sorted(get_variables_not_in(
            ''.join(self.input_terms),
            set(self.output_term)))

    def __eq__(self, other):
        return (
            isinstance(other, Equation) and
            self.input_terms == other.input_terms and
            self.output_term == other.output_term
        )

    def __hash__(self):
        return hash((tuple(self.input_terms), self.output_term))

    def __repr__(self):
        return f'Equation({self.source!r})'

class EquationParser:
    r"""Parses and validates einsum equations.

    Construct one and pass it wherever equations are compiled; the syntax
    pattern is compiled once, when the parser is created.
    """

    def __init__(self):
        self.pattern = re.compile(r'[a-z]+(?:,[a-z]+)*->[a-z]*')

    def parse(self, equation: str, num_operands: int) -> Equation:
        r"""Parse an equation of the form ``ij,jk->ik``.

        :param equation: Equation text. Leading and trailing whitespace is
            ignored.
        :param num_operands: The number of operands the equation will be
            applied to.
        :return: The parsed equation.
        :raises MalformedEquationError: If the equation is not well-formed
            or has the wrong number of input terms.
        """
        if not isinstance(equation, str):
            raise TypeError(
                f'equation must be a str, not {type(equation).__name__}')
        source = equation.strip()
        if self.pattern.fullmatch(source) is None:
            raise MalformedEquationError(
                f'invalid einsum equation: {equation!r}')
        args_str, output_term = source.split('->', 1)
        input_terms = args_str.split(',')
        if len(input_terms) != num_operands:
            raise MalformedEquationError(
                'equation {!r} has {} input terms, but {} operands were '
                'given'.format(source, len(input_terms), num_operands))
        input_labels = set(args_str)
        seen = set()
        for label in output_term:
            if label not in input_labels:
                raise MalformedEquationError(
                    'output label {!r} in {!r} does not appear in any '
                    'input term'.format(label, source))
            if label in seen:
                raise MalformedEquationError(
                    'output label {!r} is repeated in {!r}'.format(
                        label, source))
            seen.add(label)
        return Equation(source, input_terms, output_term)

def compile_equation(
        equation: str,
        num_operands: int,
        parser: typing.Optional[EquationParser]=None
    ) -> Equation:
    r"""Parse an einsum equation.

    :param equation: An equation in einsum syntax.
    :param num_operands: The number of operands.
    :param parser: Parser to use. A new one is created if not given.
    :return: The parsed equation.
    """
    if parser is None:
        parser = EquationParser()
    return parser.parse(equation, num_operands)

def get_variables_not_in(variables, excluded):
    added = set()
    result = []
    for variable in variables:
        if variable not in excluded and variable not in added:
            added.add(variable)
            result.append(variable)
    return result
