"""Escape-time evaluation of the Mandelbrot recurrence ``z <- z**2 + c``."""

from __future__ import annotations

import numpy as np
import tensorflow as tf

# Squared escape radius (|z| > 2).
HORIZON_SQ = 4.0
DEVICE = "/CPU:0"


def escape_time(cx: float, cy: float, max_iterations: int) -> int:
    """Return the number of iterations before ``z`` escapes, capped at ``max_iterations``.

    A result equal to ``max_iterations`` means the point is presumed to be inside
    the set.
    """

    zx = 0.0
    zy = 0.0
    n = 0
    while n < max_iterations and zx * zx + zy * zy <= HORIZON_SQ:
        zx, zy = zx * zx - zy * zy + cx, 2.0 * zx * zy + cy
        n += 1
    return n


_VECTOR = tf.TensorSpec(shape=[None], dtype=tf.float64)
_SCALAR = tf.TensorSpec(shape=[], dtype=tf.int64)


@tf.function
def _escape_step(
    cx: tf.Tensor,
    cy: tf.Tensor,
    zx: tf.Tensor,
    zy: tf.Tensor,
    ns: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single iteration for points that have not escaped."""

    zx_new = zx * zx - zy * zy + cx
    zy_new = 2.0 * zx * zy + cy
    zx = tf.where(active, zx_new, zx)
    zy = tf.where(active, zy_new, zy)
    ns = ns + tf.cast(active, tf.int64)
    norm_sq = zx * zx + zy * zy
    horizon = tf.constant(HORIZON_SQ, dtype=tf.float64)
    active = tf.logical_and(active, norm_sq <= horizon)
    return zx, zy, ns, active


@tf.function(input_signature=[_VECTOR, _VECTOR, _SCALAR])
def _escape_run(cx: tf.Tensor, cy: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Iterate every point with a TensorFlow while loop and return the counts."""

    i = tf.constant(0, dtype=tf.int64)
    zx = tf.zeros_like(cx)
    zy = tf.zeros_like(cy)
    ns = tf.zeros(tf.shape(cx), dtype=tf.int64)
    active = tf.ones(tf.shape(cx), dtype=tf.bool)

    def cond(i, zx, zy, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zx, zy, ns, active):
        zx, zy, ns, active = _escape_step(cx, cy, zx, zy, ns, active)
        return i + 1, zx, zy, ns, active

    _, _, _, ns, _ = tf.while_loop(cond, body, (i, zx, zy, ns, active))
    return ns


def escape_time_grid(cx: np.ndarray, cy: np.ndarray, max_iterations: int) -> np.ndarray:
    """Vectorised :func:`escape_time` over arrays of equal shape.

    Returns an ``int64`` array with the same shape as ``cx``.
    """

    cx = np.asarray(cx, dtype=np.float64)
    cy = np.asarray(cy, dtype=np.float64)
    if cx.shape != cy.shape:
        raise ValueError(f"coordinate arrays differ in shape: {cx.shape} != {cy.shape}")
    if cx.size == 0:
        return np.zeros(cx.shape, dtype=np.int64)

    with tf.device(DEVICE):
        ns = _escape_run(
            tf.convert_to_tensor(cx.reshape(-1), dtype=tf.float64),
            tf.convert_to_tensor(cy.reshape(-1), dtype=tf.float64),
            tf.constant(max_iterations, dtype=tf.int64),
        )
    return ns.numpy().reshape(cx.shape)
