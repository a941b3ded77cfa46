r"""Rendering of program trees as Weld IR."""

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

def render_weld(program: Program) -> str:
    r"""Render a program as a Weld function.

    For example, the transpose ``ij->ji`` of a 2x3 matrix of ``f64``
    renders as::

        |arg0: vec[f64]| flatten(result(for(rangeiter(0L, 3L, 1L),
        appender[vec[f64]], |acc, j, elt| merge(acc, result(for(rangeiter(0L,
        2L, 1L), appender[f64], |acc, i, elt| merge(acc, lookup(arg0, (i * 3L) +
        (j * 1L)))))))))

    (without the line breaks).
    """
    params = ', '.join(
        f'{param}: {vector_type(program.dtype)}'
        for param in program.params)
    return f'|{params}| {render_node(program.body)}'

def render_node(node) -> str:
    if isinstance(node, Lookup):
        return f'lookup({node.param}, {render_formula(node.formula)})'
    elif isinstance(node, Product):
        return ' * '.join(render_node(factor) for factor in node.factors)
    elif isinstance(node, Reduce):
        return render_for(
            node.label, node.size, f'merger[{node.dtype}, +]', node.body)
    elif isinstance(node, Loop):
        return render_for(
            node.label, node.size, f'appender[{node.element_type}]', node.body)
    elif isinstance(node, Flatten):
        return f'flatten({render_node(node.body)})'
    elif isinstance(node, Singleton):
        return f'result(merge(appender[{node.dtype}], {render_node(node.body)}))'
    else:
        raise TypeError(f'cannot render node {node!r}')

def render_formula(formula: IndexFormula) -> str:
    return ' + '.join(
        f'({label} * {stride}L)'
        for label, stride in formula.terms)

def render_for(label, size, builder, body):
    return (
        f'result(for(rangeiter(0L, {size}L, 1L), {builder}, '
        f'|acc, {label}, elt| merge(acc, {render_node(body)})))'
    )
