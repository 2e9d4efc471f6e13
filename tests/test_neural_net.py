"""Tests for the feed-forward network weight layout and forward pass."""

from __future__ import annotations

import random

import pytest

from network.neural_net import NetworkTopology, NeuralNetwork, WeightCountError, sigmoid


TOPOLOGIES = [
    NetworkTopology(),
    NetworkTopology(num_inputs=4, num_outputs=2, num_hidden_layers=0),
    NetworkTopology(num_inputs=3, num_outputs=1, num_hidden_layers=2, neurons_per_hidden_layer=4),
    NetworkTopology(num_inputs=6, num_outputs=3, num_hidden_layers=3, neurons_per_hidden_layer=10),
]


@pytest.mark.parametrize("topology", TOPOLOGIES)
def test_flatten_load_round_trip(topology: NetworkTopology) -> None:
    network = NeuralNetwork(topology, rng=random.Random(3))
    flat = network.flatten_weights()

    assert len(flat) == network.total_weight_count()

    network.load_weights(flat)
    assert network.flatten_weights() == flat

    fresh = NeuralNetwork(topology)
    fresh.load_weights(flat)
    assert fresh.flatten_weights() == flat


def test_total_weight_count_for_default_topology() -> None:
    # hidden: 6 neurons x (4 inputs + bias), output: 2 neurons x (6 + bias)
    assert NeuralNetwork(NetworkTopology()).total_weight_count() == 44
    assert NetworkTopology(num_hidden_layers=0).total_weight_count() == 10


def test_flat_layout_is_layer_then_neuron_then_weight() -> None:
    network = NeuralNetwork(NetworkTopology())
    network.load_weights([float(i) for i in range(44)])

    assert network.layers[0].weights[0].tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
    assert network.layers[0].weights[1, 0] == 5.0
    assert network.layers[1].weights[0, 0] == 30.0
    assert network.layers[1].weights[1, -1] == 43.0


def test_load_weights_rejects_wrong_length_and_keeps_weights() -> None:
    network = NeuralNetwork(NetworkTopology(), rng=random.Random(1))
    before = network.flatten_weights()

    with pytest.raises(WeightCountError):
        network.load_weights(before[:-1])
    with pytest.raises(WeightCountError):
        network.load_weights(before + [0.5])

    assert network.flatten_weights() == before


def test_compute_outputs_rejects_wrong_input_count() -> None:
    network = NeuralNetwork(NetworkTopology(), rng=random.Random(1))

    assert network.compute_outputs([0.1, 0.2, 0.3]) == []
    assert network.compute_outputs([0.1, 0.2, 0.3, 0.4, 0.5]) == []


def test_compute_outputs_is_deterministic() -> None:
    network = NeuralNetwork(NetworkTopology(), rng=random.Random(9))
    inputs = [0.3, -0.7, 0.1, 0.9]

    first = network.compute_outputs(inputs)
    second = network.compute_outputs(inputs)

    assert len(first) == 2
    assert first == second


def test_zero_weights_produce_half_activation() -> None:
    network = NeuralNetwork(NetworkTopology())

    assert network.compute_outputs([1.0, -1.0, 0.5, 0.25]) == [0.5, 0.5]


def test_single_layer_uses_bias_constant() -> None:
    topology = NetworkTopology(num_inputs=2, num_outputs=2, num_hidden_layers=0, bias=-1.0)
    network = NeuralNetwork(topology)
    # neuron 0: 1*a + 2*b + 3*bias, neuron 1: bias weight only
    network.load_weights([1.0, 2.0, 3.0, 0.0, 0.0, 2.0])

    outputs = network.compute_outputs([1.0, 1.0])

    assert outputs[0] == pytest.approx(0.5)
    assert outputs[1] == pytest.approx(sigmoid(-2.0, 1.0))


@pytest.mark.parametrize("response", [0.1, 1.0, 5.0])
def test_sigmoid_midpoint(response: float) -> None:
    assert sigmoid(0.0, response) == 0.5


def test_sigmoid_saturates_without_nan() -> None:
    assert sigmoid(-1e6, 1.0) == 0.0
    assert sigmoid(1e6, 1.0) == 1.0
