"""Operation whitelist guarding which inference graphs may be loaded."""

from __future__ import annotations

from typing import FrozenSet, Iterable, List

# Numerically safe primitives only; nothing that can touch files or sockets.
SAFE_OP_TYPES: FrozenSet[str] = frozenset(
    {
        "Const",
        "Placeholder",
        "Conv2D",
        "Cast",
        "Div",
        "StatelessRandomNormal",
        "ExpandDims",
        "AudioSpectrogram",
        "DecodeRaw",
        "Reshape",
        "MatMul",
        "Sum",
        "Softmax",
        "Squeeze",
        "RandomUniform",
        "Identity",
    }
)


def is_safe_op(op_type: str) -> bool:
    return op_type in SAFE_OP_TYPES


def find_unsafe_op_types(op_types: Iterable[str]) -> List[str]:
    """Return every distinct non-whitelisted op type, sorted."""
    return sorted({op for op in op_types if not is_safe_op(op)})
