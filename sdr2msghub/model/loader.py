"""Whitelist-gated loading of the speech classifier graph.

The model ships as a frozen TensorFlow GraphDef. Before anything is imported
into a graph the node list is checked against ``SAFE_OP_TYPES``; a graph is
either accepted whole or rejected with every offending op type listed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Union

import numpy as np
from google.protobuf.message import DecodeError

try:  # pragma: no cover - optional dependency
    import tensorflow as tf  # type: ignore

    HAVE_TF = True
except ImportError:  # pragma: no cover - optional dependency
    HAVE_TF = False
    tf = None  # type: ignore

from sdr2msghub.errors import MissingPortError, ModelLoadError, ScoringError, UnsafeGraphError
from sdr2msghub.model.whitelist import find_unsafe_op_types
from sdr2msghub.util.logging import get_logger

logger = get_logger(__name__)

INPUT_OP = "input/Placeholder"
OUTPUT_OP = "output"


def iter_op_types(graph_def) -> Iterator[str]:
    """Yield the op type of every node, including function library bodies."""
    for node in graph_def.node:
        yield node.op
    for func in graph_def.library.function:
        for node in func.node_def:
            yield node.op


class ScoringModel:
    """A validated graph bound to one long-lived session.

    ``score`` takes a raw, header-less clip of exactly 32 seconds and returns a
    value near 1 for speech and near 0 for anything else. Clip length is not
    checked here; a wrong length gives a meaningless value, not an error.
    """

    def __init__(self, session, input_tensor, output_tensor):
        self._session = session
        self._input = input_tensor
        self._output = output_tensor

    def score(self, clip: bytes) -> float:
        # a closed session raises RuntimeError, non-numeric output ValueError
        try:
            result = self._session.run(self._output, feed_dict={self._input: bytes(clip)})
            flat = np.asarray(result, dtype=np.float32).reshape(-1)
        except Exception as exc:
            raise ScoringError(f"model evaluation failed: {exc}") from exc
        if flat.size == 0:
            raise ScoringError("model produced an empty output tensor")
        return float(flat[0])

    def close(self) -> None:
        self._session.close()


def load_model(path: Union[str, Path], *, session_config: Optional[object] = None) -> ScoringModel:
    """Read, validate, and bind the graph at ``path``."""
    if not HAVE_TF:
        raise ModelLoadError("tensorflow is not installed")

    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ModelLoadError(f"cannot read model file {path}: {exc}") from exc

    graph_def = tf.compat.v1.GraphDef()
    try:
        graph_def.ParseFromString(data)
    except DecodeError as exc:
        raise ModelLoadError(f"{path} is not a serialized GraphDef: {exc}") from exc

    unsafe = find_unsafe_op_types(iter_op_types(graph_def))
    if unsafe:
        logger.error("The following op types are not in whitelist: %s", ", ".join(unsafe))
        raise UnsafeGraphError(unsafe)

    graph = tf.Graph()
    with graph.as_default():
        try:
            tf.compat.v1.import_graph_def(graph_def, name="")
        except (ValueError, tf.errors.OpError) as exc:
            raise ModelLoadError(f"cannot import graph from {path}: {exc}") from exc

    output_tensor = _port(graph, OUTPUT_OP, "output")
    input_tensor = _port(graph, INPUT_OP, "input")

    session = tf.compat.v1.Session(graph=graph, config=session_config)
    logger.info("model loaded from %s (%d nodes)", path, len(graph_def.node))
    return ScoringModel(session, input_tensor, output_tensor)


def _port(graph, op_name: str, role: str):
    try:
        op = graph.get_operation_by_name(op_name)
    except KeyError as exc:
        raise MissingPortError(op_name, role) from exc
    return op.outputs[0]
