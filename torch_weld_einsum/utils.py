import torch

from .exceptions import UnsupportedDtypeError

# Element type names used in generated programs.
DTYPE_TAGS = {
    torch.float64 : 'f64',
    torch.float32 : 'f32',
    torch.int64 : 'i64',
    torch.int32 : 'i32',
    torch.int16 : 'i16',
    torch.int8 : 'i8',
    torch.uint8 : 'u8'
}

TAG_DTYPES = { tag : dtype for dtype, tag in DTYPE_TAGS.items() }

def get_dtype_tag(dtype: torch.dtype) -> str:
    try:
        return DTYPE_TAGS[dtype]
    except KeyError:
        raise UnsupportedDtypeError(f'unsupported dtype: {dtype}') from None

def get_torch_dtype(tag: str) -> torch.dtype:
    try:
        return TAG_DTYPES[tag]
    except KeyError:
        raise UnsupportedDtypeError(f'unsupported element type: {tag!r}') from None
