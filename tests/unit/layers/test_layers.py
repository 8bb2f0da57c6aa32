"""
Unit tests for the layer builders and the Architect.

The structural tests check the closed-form node, connection and gate
counts of models of the form Input(10) -> layer -> Output(2).
"""

import pytest
import numpy as np

from evograph.activations import activations
from evograph.layers      import (Architect, Layer, ConnectionType, GatingType, InputLayer, DenseLayer,
                                  OutputLayer, MaxPooling1DLayer, AvgPooling1DLayer, MinPooling1DLayer,
                                  RNNLayer, MemoryLayer, LSTMLayer, GRULayer, HopfieldLayer)
from evograph.network     import Network, Node, NodeType, PoolNode, PoolingType


# ============================================================================
# Fixtures
# ============================================================================

def build(rng, *hidden_layers):
    """Input(10) -> hidden layers -> Output(2)."""
    architect = Architect().add_layer(InputLayer(10, rng=rng))
    for layer in hidden_layers:
        architect.add_layer(layer)
    architect.add_layer(OutputLayer(2, rng=rng))
    return architect.build_model(rng)


def back_connections(network):
    """Connections pointing backwards in the activation order (self connections excluded)."""
    rank = {node: i for i, node in enumerate(network.activation_order())}
    return [conn for conn in network.connections
            if conn.from_node is not conn.to_node and rank[conn.from_node] > rank[conn.to_node]]


# ============================================================================
# Test Layer Helpers
# ============================================================================

class TestLayerConnect:

    @pytest.fixture
    def groups(self, rng):
        return [Node(rng=rng) for _ in range(4)], [Node(rng=rng) for _ in range(2)]

    def test_all_to_all(self, groups, rng):
        a, b = groups
        assert len(Layer.connect(a, b, ConnectionType.ALL_TO_ALL, rng=rng)) == 8

    def test_one_to_one(self, groups, rng):
        a, _ = groups
        c = [Node(rng=rng) for _ in range(4)]
        conns = Layer.connect(a, c, ConnectionType.ONE_TO_ONE, weight=1.0, rng=rng)
        assert [(conn.from_node, conn.to_node) for conn in conns] == list(zip(a, c))
        assert all(conn.weight == 1.0 for conn in conns)

    def test_one_to_one_needs_equal_sizes(self, groups, rng):
        a, b = groups
        with pytest.raises(ValueError):
            Layer.connect(a, b, ConnectionType.ONE_TO_ONE, rng=rng)

    def test_pooling_windows(self, groups, rng):
        a, b = groups
        conns = Layer.connect(a, b, ConnectionType.POOLING, rng=rng)
        assert [b.index(conn.to_node) for conn in conns] == [0, 0, 1, 1]
        assert all(conn.weight == 1.0 for conn in conns)

    def test_no_connection(self, groups, rng):
        a, b = groups
        assert Layer.connect(a, b, ConnectionType.NO_CONNECTION, rng=rng) == []

    def test_gate_input(self, groups, rng):
        a, b = groups
        gaters = [Node(rng=rng) for _ in range(2)]
        conns  = Layer.connect(a, b, rng=rng)
        gated  = Layer.gate(gaters, conns, GatingType.INPUT)
        assert len(gated) == 8
        for conn in conns:
            assert conn.gate_node is gaters[b.index(conn.to_node)]

    def test_gate_output(self, groups, rng):
        a, b = groups
        gaters = [Node(rng=rng) for _ in range(4)]
        conns  = Layer.connect(a, b, rng=rng)
        Layer.gate(gaters, conns, GatingType.OUTPUT)
        for conn in conns:
            assert conn.gate_node is gaters[a.index(conn.from_node)]

    def test_gate_self(self, groups, rng):
        a, _ = groups
        gaters = [Node(rng=rng) for _ in range(4)]
        conns  = [node.connect(node, 1.0) for node in a]
        assert len(Layer.gate(gaters, conns, GatingType.SELF)) == 4
        assert a[2].self_connection.gate_node is gaters[2]

    def test_empty_layer_raises(self):
        with pytest.raises(ValueError):
            DenseLayer(0)


# ============================================================================
# Test Architect
# ============================================================================

class TestArchitect:

    def test_node_order(self, rng):
        network = build(rng, DenseLayer(5, rng=rng))
        types = [node.type for node in network.nodes]
        assert types == [NodeType.INPUT] * 10 + [NodeType.OUTPUT] * 2 + [NodeType.HIDDEN] * 5
        assert [node.index for node in network.nodes] == list(range(17))

    def test_first_layer_must_be_input(self, rng):
        architect = Architect().add_layer(DenseLayer(3, rng=rng)).add_layer(OutputLayer(1, rng=rng))
        with pytest.raises(ValueError):
            architect.build_model(rng)

    def test_last_layer_must_be_output(self, rng):
        architect = Architect().add_layer(InputLayer(2, rng=rng)).add_layer(DenseLayer(3, rng=rng))
        with pytest.raises(ValueError):
            architect.build_model(rng)

    def test_input_layer_accepts_no_connections(self, rng):
        with pytest.raises(ValueError):
            Architect().add_layer(InputLayer(2, rng=rng), ConnectionType.ALL_TO_ALL)

    def test_dense_layer_needs_connections(self, rng):
        with pytest.raises(ValueError):
            Architect().add_layer(DenseLayer(2, rng=rng), ConnectionType.NO_CONNECTION)

    def test_default_activations(self, rng):
        network = build(rng, DenseLayer(3, rng=rng))
        assert all(node.squash is activations['logistic'] for node in network.hidden_nodes)
        assert all(node.squash is activations['identity'] for node in network.output_nodes)

    def test_built_model_activates(self, rng):
        network = build(rng, DenseLayer(4, rng=rng))
        assert len(network.activate(list(np.linspace(0, 1, 10)))) == 2


# ============================================================================
# Test Closed Forms
# ============================================================================

class TestClosedForms:

    def test_dense_stack(self, rng):
        network = build(rng, DenseLayer(5, rng=rng), DenseLayer(3, rng=rng))
        assert len(network.nodes) == 10 + 5 + 3 + 2
        assert len(network.connections) == 10 * 5 + 5 * 3 + 3 * 2
        assert network.gates == []

    def test_direct_input_to_output(self, rng):
        network = build(rng)
        assert len(network.nodes) == 12
        assert len(network.connections) == 20

    @pytest.mark.parametrize("layer_class, pooling_type", [
        (MaxPooling1DLayer, PoolingType.MAX_POOLING),
        (AvgPooling1DLayer, PoolingType.AVG_POOLING),
        (MinPooling1DLayer, PoolingType.MIN_POOLING),
    ])
    @pytest.mark.parametrize("k", [1, 2, 5])
    def test_pooling(self, rng, layer_class, pooling_type, k):
        network = build(rng, DenseLayer(10, rng=rng), layer_class(k, rng=rng))
        assert len(network.nodes) == 10 + 10 + k + 2
        assert len(network.connections) == 100 + 10 + 2 * k

        pools = [node for node in network.nodes if isinstance(node, PoolNode)]
        assert len(pools) == k
        assert all(pool.pooling_type is pooling_type and pool.bias == 1.0 for pool in pools)
        assert all(pool.squash is activations['identity'] for pool in pools)

    @pytest.mark.parametrize("n", [1, 3, 4])
    def test_rnn(self, rng, n):
        network = build(rng, RNNLayer(n, rng=rng))
        assert len(network.nodes) == 12 + n
        assert len(network.connections) == 10 * n + n + 2 * n
        assert sum(node.self_connection is not None for node in network.nodes) == n

    @pytest.mark.parametrize("n", [1, 3, 5])
    def test_lstm(self, rng, n):
        network = build(rng, LSTMLayer(n, rng=rng))
        assert len(network.nodes) == 12 + 6 * n
        assert len(network.connections) == 10 * n + 8 * n * n + n + 2 * n
        assert len(network.gates) == 2 * n * n + n

    @pytest.mark.parametrize("n", [1, 3, 5])
    def test_gru(self, rng, n):
        network = build(rng, GRULayer(n, rng=rng))
        assert len(network.nodes) == 12 + 7 * n
        assert len(network.connections) == 10 * n + 8 * n * n + 2 * n + 2 * n
        assert len(network.gates) == 3 * n * n

    @pytest.mark.parametrize("n", [1, 3, 5])
    def test_hopfield(self, rng, n):
        network = build(rng, HopfieldLayer(n, rng=rng))
        assert len(network.nodes) == 12 + 2 * n
        assert len(network.connections) == 10 * n + 2 * n * n + 2 * n
        assert network.gates == []
        assert len(back_connections(network)) == n * n

    @pytest.mark.parametrize("n, memory_size", [(1, 1), (2, 3)])
    def test_memory(self, rng, n, memory_size):
        layer   = MemoryLayer(n, memory_size, rng=rng)
        network = build(rng, layer)
        assert len(network.nodes) == 12 + n * (memory_size + 1)
        assert len(network.connections) == 10 * n + memory_size * n + 2 * n
        assert layer.output_nodes == layer.nodes[:n]
        assert layer.input_nodes == layer.nodes[-n:]


# ============================================================================
# Test Recurrent Behavior
# ============================================================================

class TestRecurrentLayers:

    def test_memory_layer_delays_input(self, rng):
        identity  = activations['identity']
        architect = (Architect()
                     .add_layer(InputLayer(1, rng=rng))
                     .add_layer(MemoryLayer(1, 2, identity, rng=rng))
                     .add_layer(OutputLayer(1, identity, rng=rng)))
        network = architect.build_model(rng)
        for conn in network.connections:
            conn.weight = 1.0
        for node in network.nodes:
            if node.type is not NodeType.INPUT:
                node.bias = 0.0

        outputs = [network.activate([x])[0] for x in [1.0, 0.0, 0.0, 0.0]]
        assert outputs == pytest.approx([0.0, 0.0, 1.0, 0.0])

    def test_memory_size_must_be_positive(self):
        with pytest.raises(ValueError):
            MemoryLayer(2, 0)

    def test_lstm_gating(self, rng):
        layer = LSTMLayer(2, rng=rng)
        input_gate, forget_gate, memory_cell, output_gate = (layer.nodes[2:4], layer.nodes[4:6],
                                                             layer.nodes[6:8], layer.nodes[8:10])
        for cell in memory_cell:
            assert cell.self_connection.gate_node in forget_gate
            assert all(conn.gate_node in input_gate for conn in cell.incoming
                       if conn.from_node in layer.input_nodes)
            assert all(conn.gate_node in output_gate for conn in cell.outgoing
                       if conn.to_node in layer.output_nodes)

    def test_lstm_model_trains(self, rng):
        network = build(rng, LSTMLayer(2, rng=rng))
        sequence = [list(rng.random(10)) for _ in range(4)]
        for values in sequence:
            network.activate(values)
            network.propagate([0.5, -0.5], rate=0.05)
        assert all(np.isfinite(network.activate(sequence[0])))

    def test_gru_model_survives_serialization(self, rng):
        network = build(rng, GRULayer(2, rng=rng))
        copy    = Network.from_dict(network.to_dict(), rng)
        assert len(copy.gates) == len(network.gates)

        values = list(rng.random(10))
        for _ in range(3):
            expected = network.activate(values, trace=False)
            assert copy.activate(values, trace=False) == pytest.approx(expected)

    def test_hopfield_outputs_are_binary(self, rng):
        layer = HopfieldLayer(3, rng=rng)
        assert all(node.squash is activations['step'] for node in layer.output_nodes)
        network = build(rng, layer)
        network.activate(list(rng.random(10)))
        assert all(node.activation in (0.0, 1.0) for node in layer.output_nodes)
