"""Fixed-topology feed-forward neural network driven by flat weight vectors."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from core.deterministic_rng import random_clamped


class WeightCountError(ValueError):
    """Raised when a weight vector does not match the network topology."""


@dataclass(frozen=True)
class NetworkTopology:
    """Shape and activation constants shared by every network in a run."""

    num_inputs: int = 4
    num_outputs: int = 2
    num_hidden_layers: int = 1
    neurons_per_hidden_layer: int = 6
    activation_response: float = 1.0
    bias: float = -1.0

    def layer_shapes(self) -> list[tuple[int, int]]:
        """Return ``(neurons, inputs + 1)`` for every layer, output layer last.

        The extra column in each row holds the bias weight.
        """
        if self.num_hidden_layers <= 0:
            return [(self.num_outputs, self.num_inputs + 1)]

        shapes = [(self.neurons_per_hidden_layer, self.num_inputs + 1)]
        for _ in range(self.num_hidden_layers - 1):
            shapes.append((self.neurons_per_hidden_layer, self.neurons_per_hidden_layer + 1))
        shapes.append((self.num_outputs, self.neurons_per_hidden_layer + 1))
        return shapes

    def total_weight_count(self) -> int:
        return sum(rows * cols for rows, cols in self.layer_shapes())


def sigmoid(netinput: float | np.ndarray, response: float) -> float | np.ndarray:
    """Logistic activation ``1 / (1 + e^(-netinput / response))``."""
    with np.errstate(over="ignore"):
        result = 1.0 / (1.0 + np.exp(-np.asarray(netinput, dtype=float) / response))
    if np.ndim(result) == 0:
        return float(result)
    return result


@dataclass
class NeuronLayer:
    """One layer of neurons stored as a ``(neurons, inputs + 1)`` matrix."""

    weights: np.ndarray

    @property
    def num_neurons(self) -> int:
        return int(self.weights.shape[0])

    @property
    def num_inputs(self) -> int:
        return int(self.weights.shape[1]) - 1

    def activate(self, inputs: np.ndarray, bias: float, response: float) -> np.ndarray:
        netinput = self.weights[:, :-1] @ inputs + self.weights[:, -1] * bias
        return sigmoid(netinput, response)


class NeuralNetwork:
    """Fully-connected feed-forward network.

    Weights are exchanged with the genetic algorithm as a flat sequence laid
    out layer-major, then neuron-major, then input weights followed by the
    bias weight. The flat layout matches a row-major flattening of each
    layer matrix.
    """

    def __init__(self, topology: NetworkTopology, rng: random.Random | None = None) -> None:
        self.topology = topology
        self.layers: list[NeuronLayer] = []
        for rows, cols in topology.layer_shapes():
            if rng is None:
                weights = np.zeros((rows, cols), dtype=float)
            else:
                weights = np.array(
                    [[random_clamped(rng) for _ in range(cols)] for _ in range(rows)],
                    dtype=float,
                )
            self.layers.append(NeuronLayer(weights=weights))
        self._weight_count = topology.total_weight_count()

    @property
    def num_inputs(self) -> int:
        return self.topology.num_inputs

    @property
    def num_outputs(self) -> int:
        return self.topology.num_outputs

    def total_weight_count(self) -> int:
        return self._weight_count

    def layer_shapes(self) -> list[tuple[int, int]]:
        return [layer.weights.shape for layer in self.layers]

    def flatten_weights(self) -> list[float]:
        """Return every weight as one flat list."""
        if not self.layers:
            return []
        return np.concatenate([layer.weights.ravel() for layer in self.layers]).tolist()

    def load_weights(self, flat: Sequence[float]) -> None:
        """Overwrite every weight from ``flat``.

        Raises:
            WeightCountError: if ``flat`` is not exactly
                ``total_weight_count()`` long. The network is left unchanged.
        """
        values = np.asarray(flat, dtype=float).ravel()
        if values.size != self._weight_count:
            raise WeightCountError(
                f"Expected {self._weight_count} weights, got {values.size}."
            )

        offset = 0
        for layer in self.layers:
            size = layer.weights.size
            layer.weights = values[offset:offset + size].reshape(layer.weights.shape).copy()
            offset += size

    def compute_outputs(self, inputs: Sequence[float]) -> list[float]:
        """Feed ``inputs`` through every layer and return the output activations.

        Returns an empty list when the number of inputs does not match the
        topology; callers treat that as a processing failure.
        """
        if len(inputs) != self.topology.num_inputs:
            return []

        signal = np.asarray(inputs, dtype=float)
        for layer in self.layers:
            signal = layer.activate(signal, self.topology.bias, self.topology.activation_response)
        return [float(value) for value in signal]
