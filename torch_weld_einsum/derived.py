__all__ = [
    'tensordot', 'inner', 'dot', 'mm', 'bmm', 'mv', 'outer', 'trace',
    'diagonal', 'transpose'
]

from .einsum import einsum

MAX_LABELS = 26

def index_range(start, stop):
    if stop > MAX_LABELS:
        raise ValueError(
            f'einsum supports at most {MAX_LABELS} distinct axes')
    e = []
    for i in range(start, stop):
        e.append(chr(ord('a')+i))
    return ''.join(e)

def tensordot(a, b, ndim, **kwargs):
    r"""Contract the last ``ndim`` axes of ``a`` with the first ``ndim`` axes
    of ``b``, like :py:func:`torch.tensordot`."""
    if isinstance(ndim, (tuple, list)):
        raise NotImplementedError()
    if ndim < 0 or ndim > a.ndim or ndim > b.ndim:
        raise ValueError(
            f'cannot contract {ndim} axes of tensors with {a.ndim} and '
            f'{b.ndim} axes')
    e = (index_range(0, a.ndim) +
         ',' +
         index_range(a.ndim-ndim, a.ndim+b.ndim-ndim) +
         '->' +
         index_range(0, a.ndim-ndim) +
         index_range(a.ndim, a.ndim+b.ndim-ndim))
    return einsum(e, a, b, **kwargs)

def inner(a, b, **kwargs):
    r"""Contract the last axis of ``a`` with the last axis of ``b``.

    Unlike :py:func:`torch.inner`, the result of two vectors has shape
    ``(1,)``.
    """
    if a.ndim == 0 or b.ndim == 0:
        raise ValueError('inner of 0-dimensional tensors is not allowed')
    ai = index_range(1, a.ndim)
    bi = index_range(a.ndim, a.ndim+b.ndim-1)
    e = ai + 'a,' + bi + 'a->' + ai + bi
    return einsum(e, a, b, **kwargs)

def dot(a, b, **kwargs):
    return einsum('i,i->', a, b, **kwargs)

def mm(a, b, **kwargs):
    return einsum('ik,kj->ij', a, b, **kwargs)

def bmm(a, b, **kwargs):
    return einsum('bik,bkj->bij', a, b, **kwargs)

def mv(a, b, **kwargs):
    return einsum('ik,k->i', a, b, **kwargs)

def outer(a, b, **kwargs):
    return einsum('i,j->ij', a, b, **kwargs)

def trace(a, **kwargs):
    return einsum('ii->', a, **kwargs)

def diagonal(a, **kwargs):
    return einsum('ii->i', a, **kwargs)

def transpose(a, **kwargs):
    return einsum('ij->ji', a, **kwargs)
