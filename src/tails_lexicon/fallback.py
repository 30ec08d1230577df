"""Neural fallback used when no stored pair matches."""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np
from numpy.typing import NDArray

from .config import FallbackConfig
from .logging import get_logger
from .utils import resolve_seed

LOGGER = get_logger(__name__)


class FallbackGenerator(Protocol):
    """Maps a bag-of-words vector to a same-length activation vector."""

    @property
    def trained(self) -> bool: ...

    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None: ...

    def infer(self, vector: NDArray[np.float64]) -> NDArray[np.float64]: ...


class NullGenerator:
    """Generator that never activates; used when the fallback is disabled."""

    trained = True

    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        return None

    def infer(self, vector: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.zeros_like(np.asarray(vector, dtype=float))


class FeedForwardGenerator:
    """A NumPy feed-forward network with one sigmoid hidden layer.

    Trained with full-batch gradient descent on mean squared error until the
    error drops below ``error_threshold`` or ``iterations`` are exhausted.
    """

    def __init__(self, config: FallbackConfig | None = None, seed: Optional[int] = None) -> None:
        self.config = config or FallbackConfig()
        self.seed = resolve_seed(seed)
        self.hidden_weights: NDArray[np.float64] | None = None
        self.hidden_bias: NDArray[np.float64] | None = None
        self.output_weights: NDArray[np.float64] | None = None
        self.output_bias: NDArray[np.float64] | None = None
        self.error: float | None = None

    @property
    def trained(self) -> bool:
        return self.hidden_weights is not None

    # Training --------------------------------------------------------------------
    def train(self, inputs: NDArray[np.float64], targets: NDArray[np.float64]) -> None:
        inputs = np.atleast_2d(np.asarray(inputs, dtype=float))
        targets = np.atleast_2d(np.asarray(targets, dtype=float))
        if inputs.shape[0] == 0 or inputs.shape[1] == 0:
            LOGGER.debug("No training rows supplied; fallback stays untrained")
            self._reset()
            return
        if inputs.shape[0] != targets.shape[0]:
            raise ValueError("Inputs and targets must have the same number of rows")
        rng = np.random.default_rng(self.seed)
        hidden_dim = self.config.hidden_dim
        self.hidden_weights = rng.normal(0, 0.5, size=(inputs.shape[1], hidden_dim))
        self.hidden_bias = np.zeros(hidden_dim, dtype=float)
        self.output_weights = rng.normal(0, 0.5, size=(hidden_dim, targets.shape[1]))
        self.output_bias = np.zeros(targets.shape[1], dtype=float)
        rows = inputs.shape[0]
        error = float("inf")
        iteration = 0
        for iteration in range(1, self.config.iterations + 1):
            hidden = self._sigmoid(inputs @ self.hidden_weights + self.hidden_bias)
            output = self._sigmoid(hidden @ self.output_weights + self.output_bias)
            residual = output - targets
            error = float(np.mean(residual**2))
            if error < self.config.error_threshold:
                break
            delta_out = residual * output * (1.0 - output) / rows
            delta_hidden = (delta_out @ self.output_weights.T) * hidden * (1.0 - hidden)
            self.output_weights -= self.config.learning_rate * (hidden.T @ delta_out)
            self.output_bias -= self.config.learning_rate * delta_out.sum(axis=0)
            self.hidden_weights -= self.config.learning_rate * (inputs.T @ delta_hidden)
            self.hidden_bias -= self.config.learning_rate * delta_hidden.sum(axis=0)
        self.error = error
        LOGGER.debug("Fallback trained on %d rows | iterations=%d error=%.4f", rows, iteration, error)

    def _reset(self) -> None:
        self.hidden_weights = None
        self.hidden_bias = None
        self.output_weights = None
        self.output_bias = None
        self.error = None

    # Inference -------------------------------------------------------------------
    def infer(self, vector: NDArray[np.float64]) -> NDArray[np.float64]:
        values = np.asarray(vector, dtype=float)
        if (
            self.hidden_weights is None
            or self.hidden_bias is None
            or self.output_weights is None
            or self.output_bias is None
        ):
            return np.zeros_like(values)
        if values.shape != (self.hidden_weights.shape[0],):
            msg = f"Expected vector of length {self.hidden_weights.shape[0]}, got shape {values.shape}"
            raise ValueError(msg)
        hidden = self._sigmoid(values @ self.hidden_weights + self.hidden_bias)
        return self._sigmoid(hidden @ self.output_weights + self.output_bias)

    @staticmethod
    def _sigmoid(values: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.asarray(1.0 / (1.0 + np.exp(-np.clip(values, -500, 500))), dtype=float)
