"""Three-layer sigmoid network trained by backpropagation with momentum."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .activations import sigmoid, sigmoid_deriv
from .errors import InvalidArgumentError
from .types import Array, NetworkConfig


def _uniform_init(rng: np.random.Generator, size: int) -> Array:
    return rng.uniform(-0.5, 0.5, size=size)


class Network:
    """Fully connected input/hidden/output network with flat numeric state.

    All neurons share one global index space: ``[0, input_count)`` are the
    inputs, followed by the hidden neurons and then the outputs. The weights
    live in a single flat ``matrix`` made of two row-major blocks,
    input->hidden (hidden-major) followed by hidden->output (output-major).
    Both blocks are exposed internally as reshaped views over that buffer so
    the forward and backward passes walk exactly the same layout.

    Training follows a strict protocol: ``compute_outputs`` on an input,
    ``calc_error`` with the matching ideal vector (possibly repeated over
    several examples) and finally ``learn``. ``train`` runs the three steps
    for a single example.
    """

    def __init__(self, config: NetworkConfig, rng: np.random.Generator | None = None) -> None:
        self._config = config
        self._rng = rng if rng is not None else np.random.default_rng(config.seed)

        ni, nh, no = config.input_count, config.hidden_count, config.output_count
        self._hidden = slice(ni, ni + nh)
        self._output = slice(ni + nh, ni + nh + no)
        self._split = ni * nh

        neurons = config.neuron_count
        weights = config.weight_count

        self._fire = np.zeros(neurons, dtype=np.float64)
        self._matrix = _uniform_init(self._rng, weights).astype(np.float64)
        self._matrix_delta = np.zeros(weights, dtype=np.float64)
        self._acc_matrix_delta = np.zeros(weights, dtype=np.float64)
        self._thresholds = np.zeros(neurons, dtype=np.float64)
        self._thresholds[ni:] = _uniform_init(self._rng, nh + no)
        self._threshold_delta = np.zeros(neurons, dtype=np.float64)
        self._acc_threshold_delta = np.zeros(neurons, dtype=np.float64)
        self._error = np.zeros(neurons, dtype=np.float64)
        self._error_delta = np.zeros(neurons, dtype=np.float64)
        self._global_error = 0.0

        # views share memory with the flat buffers
        self._w_in = self._matrix[: self._split].reshape(nh, ni)
        self._w_out = self._matrix[self._split :].reshape(no, nh)
        self._acc_in = self._acc_matrix_delta[: self._split].reshape(nh, ni)
        self._acc_out = self._acc_matrix_delta[self._split :].reshape(no, nh)

    @classmethod
    def from_counts(
        cls,
        input_count: int,
        hidden_count: int,
        output_count: int,
        learn_rate: float,
        momentum: float,
        *,
        seed: int | None = None,
    ) -> "Network":
        config = NetworkConfig(
            input_count=input_count,
            hidden_count=hidden_count,
            output_count=output_count,
            learn_rate=learn_rate,
            momentum=momentum,
            seed=seed,
        )
        return cls(config)

    def __repr__(self) -> str:
        return "<Network input=%d, hidden=%d, output=%d>" % (
            self.input_count,
            self.hidden_count,
            self.output_count,
        )

    # ------------------------------------------------------------------
    # Topology and hyper-parameters

    @property
    def config(self) -> NetworkConfig:
        return self._config

    @property
    def input_count(self) -> int:
        return self._config.input_count

    @property
    def hidden_count(self) -> int:
        return self._config.hidden_count

    @property
    def output_count(self) -> int:
        return self._config.output_count

    @property
    def neuron_count(self) -> int:
        return self._config.neuron_count

    @property
    def weight_count(self) -> int:
        return self._config.weight_count

    @property
    def parameter_count(self) -> int:
        return self.weight_count + self.neuron_count

    @property
    def learn_rate(self) -> float:
        return self._config.learn_rate

    @property
    def momentum(self) -> float:
        return self._config.momentum

    # ------------------------------------------------------------------
    # Read-only snapshots of the internal buffers

    @property
    def weights(self) -> Array:
        return self._matrix.copy()

    @property
    def thresholds(self) -> Array:
        return self._thresholds.copy()

    @property
    def activations(self) -> Array:
        return self._fire.copy()

    @property
    def errors(self) -> Array:
        return self._error.copy()

    @property
    def error_deltas(self) -> Array:
        return self._error_delta.copy()

    @property
    def accumulated_weight_deltas(self) -> Array:
        return self._acc_matrix_delta.copy()

    @property
    def accumulated_threshold_deltas(self) -> Array:
        return self._acc_threshold_delta.copy()

    @property
    def weight_deltas(self) -> Array:
        return self._matrix_delta.copy()

    @property
    def threshold_deltas(self) -> Array:
        return self._threshold_delta.copy()

    @property
    def global_error(self) -> float:
        return self._global_error

    # ------------------------------------------------------------------
    # Numeric engine

    def compute_outputs(self, inputs: Sequence[float] | Array) -> Array:
        """Run a forward pass and return the output activations.

        Parameters
        ----------
        inputs: array-like, shape=(input_count,)
            Values copied into the input neurons.

        Returns
        -------
        out: ndarray, shape=(output_count,)
            Sigmoid activations of the output neurons.
        """

        x = self._as_vector(inputs, self.input_count, "input")
        ni = self.input_count
        self._fire[:ni] = x

        hidden = self._thresholds[self._hidden] + self._w_in @ self._fire[:ni]
        self._fire[self._hidden] = sigmoid(hidden)

        output = self._thresholds[self._output] + self._w_out @ self._fire[self._hidden]
        self._fire[self._output] = sigmoid(output)

        return self._fire[self._output].copy()

    def calc_error(self, ideal: Sequence[float] | Array) -> None:
        """Accumulate error and gradient for the forward pass just run.

        Must follow ``compute_outputs`` on the input matching ``ideal``.
        Repeated calls accumulate until ``learn`` drains the gradients and
        ``get_error`` drains the squared error sum.
        """

        target = self._as_vector(ideal, self.output_count, "ideal")
        ni = self.input_count
        fire_in = self._fire[:ni]
        fire_hidden = self._fire[self._hidden]
        fire_out = self._fire[self._output]

        self._error[ni:] = 0.0

        out_error = target - fire_out
        self._error[self._output] = out_error
        self._global_error += float(np.sum(out_error * out_error))
        out_delta = out_error * sigmoid_deriv(fire_out)
        self._error_delta[self._output] = out_delta

        self._acc_out += np.outer(out_delta, fire_hidden)
        self._error[self._hidden] += self._w_out.T @ out_delta
        self._acc_threshold_delta[self._output] += out_delta

        hidden_delta = self._error[self._hidden] * sigmoid_deriv(fire_hidden)
        self._error_delta[self._hidden] = hidden_delta

        self._acc_in += np.outer(hidden_delta, fire_in)
        # input neurons carry no threshold; their error is informational only
        self._error[:ni] += self._w_in.T @ hidden_delta
        self._acc_threshold_delta[self._hidden] += hidden_delta

    def learn(self) -> None:
        """Apply one momentum-smoothed step and clear the accumulators."""

        self._matrix_delta[:] = (
            self.learn_rate * self._acc_matrix_delta + self.momentum * self._matrix_delta
        )
        self._matrix += self._matrix_delta
        self._acc_matrix_delta[:] = 0.0

        ni = self.input_count
        self._threshold_delta[ni:] = (
            self.learn_rate * self._acc_threshold_delta[ni:]
            + self.momentum * self._threshold_delta[ni:]
        )
        self._thresholds[ni:] += self._threshold_delta[ni:]
        self._acc_threshold_delta[ni:] = 0.0

    def get_error(self, length: int) -> float:
        """Return the RMS error over ``length`` examples and reset the sum.

        ``length`` must be the number of ``calc_error`` calls since the last
        reset; a mismatched count yields a meaningless value.
        """

        if length <= 0:
            raise InvalidArgumentError(f"length must be positive, got {length}")
        err = math.sqrt(self._global_error / (length * self.output_count))
        self._global_error = 0.0
        return err

    def train(self, inputs: Sequence[float] | Array, ideal: Sequence[float] | Array) -> None:
        """One online gradient step on a single example."""

        self.compute_outputs(inputs)
        self.calc_error(ideal)
        self.learn()

    def predict(self, inputs: Sequence[float] | Array) -> Array:
        return self.compute_outputs(inputs)

    # ------------------------------------------------------------------
    # Parameter transfer used by ffbpnet.core.persistence

    def _export_parameters(self) -> Array:
        return np.concatenate([self._matrix, self._thresholds])

    def _import_parameters(self, flat: Array) -> None:
        self._matrix[:] = flat[: self.weight_count]
        self._thresholds[:] = flat[self.weight_count :]

    @staticmethod
    def _as_vector(values: Sequence[float] | Array, expected: int, name: str) -> Array:
        vector = np.asarray(values, dtype=np.float64)
        if vector.ndim != 1:
            raise InvalidArgumentError(
                f"{name} vector must be one-dimensional, got shape {vector.shape}"
            )
        if vector.shape[0] != expected:
            raise InvalidArgumentError(
                f"{name} vector must have length {expected}, got {vector.shape[0]}"
            )
        return vector


__all__ = ["Network"]
