"""
Recurrent Layers Module.

Recurrent layers keep state between activations through self connections,
backward connections and gates. Within a layer the nodes are ordered so
that every node reading a value of the current step comes after the node
producing it; connections pointing backwards in that order read the value
of the previous step.

Classes:
    RNNLayer:      Self connected hidden nodes
    MemoryLayer:   A chain of delay blocks
    LSTMLayer:     Long short-term memory cells
    GRULayer:      Gated recurrent units
    HopfieldLayer: A fully recurrent pair of groups with binary outputs
"""

import numpy as np
from typing import Callable

from evograph.activations  import activations
from evograph.layers.layer import Layer, ConnectionType, GatingType
from evograph.network.node import Node, NodeType

class RecurrentLayer(Layer):
    """
    Base class of the recurrent layers: hidden node groups, fully connected
    (or one to one) to the previous layer.
    """

    def _group(self, size: int, squash: Callable | None = None, bias: float | None = None) -> list[Node]:
        squash = squash if squash is not None else activations["logistic"]
        return [Node(NodeType.HIDDEN, bias, squash, self._rng) for _ in range(size)]

    def _connect(self, from_nodes, to_nodes, connection_type=ConnectionType.ALL_TO_ALL, weight=None):
        connections = Layer.connect(from_nodes, to_nodes, connection_type, weight, self._rng)
        self.connections.extend(connections)
        return connections

    def _gate(self, gaters, connections, gating_type):
        self.gates.extend(Layer.gate(gaters, connections, gating_type))

    def default_incoming_connection_type(self) -> ConnectionType:
        return ConnectionType.ALL_TO_ALL

    def connection_type_is_allowed(self, connection_type: ConnectionType) -> bool:
        return connection_type in (ConnectionType.ALL_TO_ALL, ConnectionType.ONE_TO_ONE)

class RNNLayer(RecurrentLayer):
    """
    Hidden nodes with a self connection each.
    """

    def __init__(self,
                 output_size: int,
                 activation : Callable | None = None,
                 rng        : np.random.Generator | None = None):
        super().__init__(output_size, rng)
        self.nodes = self._group(output_size, activation)
        for node in self.nodes:
            self.connections.append(node.connect(node, self._rng.uniform(-1.0, 1.0)))
        self.input_nodes  = self.nodes
        self.output_nodes = self.nodes

class MemoryLayer(RecurrentLayer):
    """
    Outputs its input delayed by 'memory_size' steps.

    The input block (with the given activation) feeds a chain of
    'memory_size' identity blocks connected one to one with weight 1; the
    last block of the chain is the output. Blocks are ordered from the end
    of the chain to its start, so each block reads the previous step's
    value of its predecessor.
    """

    def __init__(self,
                 output_size: int,
                 memory_size: int = 1,
                 activation : Callable | None = None,
                 rng        : np.random.Generator | None = None):
        super().__init__(output_size, rng)
        if memory_size < 1:
            raise ValueError(f"memory_size must be at least 1, got {memory_size}")

        blocks = [self._group(output_size, activation)]
        for _ in range(memory_size):
            block = self._group(output_size, activations["identity"], bias=0.0)
            self._connect(blocks[-1], block, ConnectionType.ONE_TO_ONE, weight=1.0)
            blocks.append(block)

        self.nodes        = [node for block in reversed(blocks) for node in block]
        self.input_nodes  = blocks[0]
        self.output_nodes = blocks[-1]

class LSTMLayer(RecurrentLayer):
    """
    Long short-term memory.

    Node groups, in activation order: input, input gate, forget gate,
    memory cell, output gate, output block (with the given activation).
    The input gate gates input -> memory cell, the forget gate gates the
    memory cell's self connections, the output gate gates memory cell ->
    output block. The memory cell feeds back into all three gates.
    """

    def __init__(self,
                 output_size: int,
                 activation : Callable | None = None,
                 rng        : np.random.Generator | None = None):
        super().__init__(output_size, rng)

        input_group  = self._group(output_size, activations["identity"], bias=0.0)
        input_gate   = self._group(output_size, bias=1.0)
        forget_gate  = self._group(output_size, bias=1.0)
        memory_cell  = self._group(output_size, activations["tanh"])
        output_gate  = self._group(output_size, bias=1.0)
        output_block = self._group(output_size, activation)

        to_memory = self._connect(input_group, memory_cell)
        self._connect(input_group, input_gate)
        self._connect(input_group, forget_gate)
        self._connect(input_group, output_gate)

        self._connect(memory_cell, input_gate)
        self._connect(memory_cell, forget_gate)
        self._connect(memory_cell, output_gate)
        forget = [node.connect(node, 1.0) for node in memory_cell]
        self.connections.extend(forget)
        to_output = self._connect(memory_cell, output_block)

        self._gate(input_gate , to_memory, GatingType.INPUT)
        self._gate(forget_gate, forget   , GatingType.SELF)
        self._gate(output_gate, to_output, GatingType.OUTPUT)

        self.nodes        = input_group + input_gate + forget_gate + memory_cell + output_gate + output_block
        self.input_nodes  = input_group
        self.output_nodes = output_block

class GRULayer(RecurrentLayer):
    """
    Gated recurrent unit.

    Node groups, in activation order: input, update gate, inverse update
    gate (1 - update), reset gate, memory cell, output (with the given
    activation), previous output. The reset gate gates previous output ->
    memory cell; the update gate and its inverse gate previous output ->
    output and memory cell -> output respectively. The previous output
    group copies the output for the next step.
    """

    def __init__(self,
                 output_size: int,
                 activation : Callable | None = None,
                 rng        : np.random.Generator | None = None):
        super().__init__(output_size, rng)

        input_group     = self._group(output_size, activations["identity"], bias=0.0)
        update_gate     = self._group(output_size, bias=1.0)
        inverse_update  = self._group(output_size, activations["inverse"], bias=0.0)
        reset_gate      = self._group(output_size, bias=0.0)
        memory_cell     = self._group(output_size, activations["tanh"])
        output          = self._group(output_size, activation)
        previous_output = self._group(output_size, activations["identity"], bias=0.0)

        self._connect(input_group, update_gate)
        self._connect(input_group, reset_gate)
        self._connect(input_group, memory_cell)

        self._connect(previous_output, update_gate)
        self._connect(update_gate, inverse_update, ConnectionType.ONE_TO_ONE, weight=1.0)
        self._connect(previous_output, reset_gate)

        reset   = self._connect(previous_output, memory_cell)
        update1 = self._connect(previous_output, output)
        update2 = self._connect(memory_cell, output)
        self._connect(output, previous_output, ConnectionType.ONE_TO_ONE, weight=1.0)

        self._gate(reset_gate    , reset  , GatingType.OUTPUT)
        self._gate(update_gate   , update1, GatingType.OUTPUT)
        self._gate(inverse_update, update2, GatingType.OUTPUT)

        self.nodes        = (input_group + update_gate + inverse_update + reset_gate
                             + memory_cell + output + previous_output)
        self.input_nodes  = input_group
        self.output_nodes = output

class HopfieldLayer(RecurrentLayer):
    """
    Two fully interconnected groups: the input group feeds the binary step
    output group, which feeds back into the input group.
    """

    def __init__(self, output_size: int, rng: np.random.Generator | None = None):
        super().__init__(output_size, rng)

        input_group  = self._group(output_size, activations["identity"])
        output_group = self._group(output_size, activations["step"])

        self._connect(input_group, output_group)
        self._connect(output_group, input_group)

        self.nodes        = input_group + output_group
        self.input_nodes  = input_group
        self.output_nodes = output_group

    def connection_type_is_allowed(self, connection_type: ConnectionType) -> bool:
        return connection_type is ConnectionType.ALL_TO_ALL
