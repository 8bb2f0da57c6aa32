"""
Network Graph Engine Module.

This module implements the Network class: a directed graph of nodes and
(possibly gated, possibly recurrent) connections, which can be activated,
trained by backpropagation, structurally edited, evolved and serialized.

Nodes are kept in an ordered list: input nodes first, then output nodes,
then hidden nodes. The position of a node in the list is its index, which
is what the serialized form and the crossover gene keys refer to.

Classes:
    Network: A trainable and evolvable neural network
"""

import math
import numpy as np
import graphviz  # type: ignore
from typing import Callable, Sequence, TYPE_CHECKING

from evograph.activations        import activation_codes, activation_name
from evograph.errors             import (SizeMismatchError, NodeNotInNetworkError, ConnectionNotInNetworkError,
                                        ConnectionNotGatedError)
from evograph.network.connection import Connection
from evograph.network.node       import Node, NodeType, PoolNode

if TYPE_CHECKING:
    from evograph.genotype.mutation import MutationKind
    from evograph.run.config        import Config

class Network:
    """
    A neural network of nodes, connections and gates.

    A new network has 'input_size' input nodes fully connected to 'output_size'
    output nodes; hidden structure is added by mutation, by the layer builders,
    or by loading a serialized network.

    Public Attributes:
        input_size:  Number of input nodes
        output_size: Number of output nodes
        nodes:       All nodes, ordered [inputs, outputs, hidden]
        connections: All connections, self connections included
        gates:       The gated connections (a subset of 'connections')
        score:       Fitness assigned during evolution (None when not evaluated)
        rng:         Random generator used by all random operations on the network

    Public Properties:
        input_nodes:  The input nodes
        output_nodes: The output nodes
        hidden_nodes: The hidden nodes, in index order
        size:         Number of hidden nodes + connections + gates

    Public Methods:
        activate(input, dropout_rate, trace):           Feed an input forward, return the output
        propagate(target, rate, momentum, update):      Backpropagate the error for a target
        clear():                                        Reset the state of all nodes
        connect(from_node, to_node, weight):            Add a connection
        disconnect(from_node, to_node):                 Remove a connection
        add_gate(node, connection):                     Gate a connection
        remove_gate(connection):                        Remove a connection's gate
        remove_node(node, keep_gates):                  Remove a hidden node, bridging its inputs and outputs
        activation_order():                             Nodes in the order they are activated
        reindex():                                      Assign each node its position as index
        train(dataset, config, **options):              Train by backpropagation
        test(dataset, loss):                            Mean loss over a dataset
        evolve(dataset, config, fitness_function, ...): Evolve the network with NEAT
        mutate(kind, config):                           Apply one mutation
        mutate_random(allowed, config):                 Apply one randomly chosen mutation
        crossover(network_a, network_b, equal, rng):    Create an offspring of two networks
        to_dict() / from_dict(record, rng):             Serialize / deserialize
        copy():                                         Deep copy via the serialized form
        visualize(view):                                Draw the network with Graphviz
    """

    def __init__(self, input_size: int, output_size: int, rng: np.random.Generator | None = None):
        """
        Create a network whose input nodes are fully connected to its output nodes.
        Weights are drawn from a normal distribution scaled by sqrt(2 / input_size).

        Parameters:
            input_size:  Number of input nodes
            output_size: Number of output nodes
            rng:         Random generator (a fresh unseeded one if not given)
        """
        self._setup(input_size, output_size, rng)

        for _ in range(input_size):
            self.nodes.append(Node(NodeType.INPUT, rng=self.rng))
        for _ in range(output_size):
            self.nodes.append(Node(NodeType.OUTPUT, rng=self.rng))

        scale = math.sqrt(2.0 / input_size)
        for input_node in self.input_nodes:
            for output_node in self.output_nodes:
                self.connect(input_node, output_node, self.rng.normal() * scale)
        self.reindex()

    def _setup(self, input_size: int, output_size: int, rng: np.random.Generator | None):
        if input_size < 1 or output_size < 1:
            raise ValueError(f"a network needs at least one input and one output, got {input_size} and {output_size}")

        self.input_size  : int                 = input_size
        self.output_size : int                 = output_size
        self.nodes       : list[Node]          = []
        self.connections : list[Connection]    = []
        self.gates       : list[Connection]    = []
        self.score       : float | None        = None
        self.rng         : np.random.Generator = rng if rng is not None else np.random.default_rng()

    @classmethod
    def _empty(cls, input_size: int, output_size: int, rng: np.random.Generator | None = None) -> 'Network':
        """
        A network without any nodes or connections, to be filled in by the caller.
        """
        network = cls.__new__(cls)
        network._setup(input_size, output_size, rng)
        return network

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def input_nodes(self) -> list[Node]:
        return [node for node in self.nodes if node.type is NodeType.INPUT]

    @property
    def output_nodes(self) -> list[Node]:
        return [node for node in self.nodes if node.type is NodeType.OUTPUT]

    @property
    def hidden_nodes(self) -> list[Node]:
        return [node for node in self.nodes if node.type is NodeType.HIDDEN]

    @property
    def size(self) -> int:
        return len(self.nodes) - self.input_size - self.output_size + len(self.connections) + len(self.gates)

    def activation_order(self) -> list[Node]:
        """
        Inputs, then hidden nodes in index order, then outputs.
        """
        return self.input_nodes + self.hidden_nodes + self.output_nodes

    def reindex(self):
        for index, node in enumerate(self.nodes):
            node.index = index

    def _check_owned(self, *nodes: Node):
        for node in nodes:
            if not any(node is own for own in self.nodes):
                raise NodeNotInNetworkError(f"{node!r} is not part of this network")

    # ------------------------------------------------------------------
    # Signal propagation
    # ------------------------------------------------------------------

    def activate(self, input: Sequence[float], dropout_rate: float = 0.0, trace: bool = True) -> list[float]:
        """
        Feed an input through the network and return the output.

        Parameters:
            input:        One value per input node
            dropout_rate: Probability of dropping out each hidden node (training only)
            trace:        Whether to keep the traces needed by propagate()

        Returns:
            One value per output node
        """
        if len(input) != self.input_size:
            raise SizeMismatchError(f"expected {self.input_size} input values, got {len(input)}")

        for node, value in zip(self.input_nodes, input):
            node.activate(value)

        for node in self.hidden_nodes:
            if trace and dropout_rate > 0:
                node.mask = 0.0 if self.rng.random() < dropout_rate else 1.0
            else:
                node.mask = 1.0
            node.activate(trace=trace)

        return [node.activate(trace=trace) for node in self.output_nodes]

    def propagate(self,
                  target  : Sequence[float],
                  rate    : float = 0.3,
                  momentum: float = 0.0,
                  update  : bool  = True):
        """
        Backpropagate the error of the last activation with respect to 'target'.
        Nodes are visited in the reverse of the activation order.

        Parameters:
            target:   One desired value per output node
            rate:     Learning rate
            momentum: Momentum
            update:   Whether to apply the accumulated weight changes
        """
        if len(target) != self.output_size:
            raise SizeMismatchError(f"expected {self.output_size} target values, got {len(target)}")

        for node, value in reversed(list(zip(self.output_nodes, target))):
            node.propagate(value, rate, momentum, update)
        for node in reversed(self.hidden_nodes):
            node.propagate(None, rate, momentum, update)
        for node in reversed(self.input_nodes):
            node.propagate(None, rate, momentum, update)

    def clear(self):
        for node in self.nodes:
            node.clear()

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def connect(self, from_node: Node, to_node: Node, weight: float | None = None) -> Connection:
        """
        Connect two nodes of the network (a node may be connected to itself).

        Raises:
            NodeNotInNetworkError:    if either node is not part of the network
            DuplicateConnectionError: if the nodes are already connected
        """
        self._check_owned(from_node, to_node)
        conn = from_node.connect(to_node, weight)
        self.connections.append(conn)
        return conn

    def disconnect(self, from_node: Node, to_node: Node) -> Connection | None:
        """
        Remove the connection between two nodes, removing its gate first.

        Returns:
            The removed connection, or None if the nodes were not connected
        """
        self._check_owned(from_node, to_node)
        if from_node is to_node:
            conn = from_node.self_connection
        else:
            conn = next((c for c in from_node.outgoing if c.to_node is to_node), None)
        if conn is None:
            return None

        if conn.gate_node is not None:
            self.remove_gate(conn)
        from_node.disconnect(to_node)
        self.connections.remove(conn)
        return conn

    def add_gate(self, node: Node, conn: Connection):
        """
        Make 'node' gate 'conn'. Does nothing if the connection is already gated.

        Raises:
            NodeNotInNetworkError:       if the node is not part of the network
            ConnectionNotInNetworkError: if the connection is not part of the network
        """
        self._check_owned(node)
        if not any(conn is own for own in self.connections):
            raise ConnectionNotInNetworkError(f"{conn!r} is not part of this network")
        if conn.gate_node is not None:
            return

        node.add_gate(conn)
        self.gates.append(conn)

    def remove_gate(self, conn: Connection):
        """
        Raises:
            ConnectionNotGatedError: if the connection is not gated
        """
        if conn.gate_node is None or not any(conn is gate for gate in self.gates):
            raise ConnectionNotGatedError(f"{conn!r} is not gated")

        conn.gate_node.remove_gate(conn)
        self.gates.remove(conn)

    def remove_node(self, node: Node, keep_gates: bool = True):
        """
        Remove a hidden node.

        Every node that projected to the removed node is connected to every
        node the removed node projected to (unless already connected), so
        signals keep flowing. With 'keep_gates', the nodes that gated the
        removed connections are randomly assigned to gate the new ones.

        Parameters:
            node:       The hidden node to remove
            keep_gates: Whether to redistribute the gates of the removed connections

        Raises:
            NodeNotInNetworkError: if the node is not part of the network
            ValueError:            if the node is an input or output node
        """
        self._check_owned(node)
        if node.type is not NodeType.HIDDEN:
            raise ValueError(f"only hidden nodes can be removed, not {node!r}")

        gaters = []
        self.disconnect(node, node)

        inputs = []
        for conn in list(node.incoming):
            if keep_gates and conn.gate_node is not None and conn.gate_node is not node:
                gaters.append(conn.gate_node)
            inputs.append(conn.from_node)
            self.disconnect(conn.from_node, node)

        outputs = []
        for conn in list(node.outgoing):
            if keep_gates and conn.gate_node is not None and conn.gate_node is not node:
                gaters.append(conn.gate_node)
            outputs.append(conn.to_node)
            self.disconnect(node, conn.to_node)

        bridges = []
        for input_node in inputs:
            for output_node in outputs:
                if not input_node.is_projecting_to(output_node):
                    bridges.append(self.connect(input_node, output_node))

        for gater in gaters:
            if not bridges:
                break
            conn = bridges.pop(int(self.rng.integers(len(bridges))))
            self.add_gate(gater, conn)

        for conn in list(node.gated):
            self.remove_gate(conn)

        self.nodes = [own for own in self.nodes if own is not node]
        self.reindex()

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def train(self, dataset: list[dict], config: 'Config | None' = None, **options) -> dict:
        """
        Train the network by backpropagation (see evograph.run.training.train).
        Keyword options override the corresponding configuration values.
        """
        # Import here to avoid circular import
        from evograph.run.config   import Config
        from evograph.run.training import train

        config = (config if config is not None else Config()).override(**options)
        return train(self, dataset, config)

    def test(self, dataset: list[dict], loss: str | Callable = "MSE") -> float:
        """
        Mean loss of the network over a dataset, with traces disabled.
        """
        # Import here to avoid circular import
        from evograph.run.training import test
        return test(self, dataset, loss)

    def evolve(self,
               dataset         : list[dict] | None = None,
               config          : 'Config | None'   = None,
               fitness_function: Callable | None   = None,
               **options) -> dict:
        """
        Evolve the network with NEAT (see evograph.run.evolution.evolve).
        On return the network has the structure of the best genome found.
        """
        # Import here to avoid circular import
        from evograph.run.config    import Config
        from evograph.run.evolution import evolve

        config = (config if config is not None else Config()).override(**options)
        return evolve(self, dataset, config, fitness_function)

    def mutate(self, kind: 'MutationKind', config: 'Config | None' = None) -> bool:
        # Import here to avoid circular import
        from evograph.genotype.mutation import mutate
        return mutate(self, kind, config, self.rng)

    def mutate_random(self, allowed: 'Sequence[MutationKind] | None' = None, config: 'Config | None' = None) -> bool:
        """
        Apply one mutation chosen uniformly from 'allowed' (default: all mutations).
        """
        # Import here to avoid circular import
        from evograph.genotype.mutation import mutate, ALL_MUTATIONS

        allowed = list(allowed) if allowed is not None else ALL_MUTATIONS
        kind    = allowed[int(self.rng.integers(len(allowed)))]
        return mutate(self, kind, config, self.rng)

    @staticmethod
    def crossover(network_a: 'Network',
                  network_b: 'Network',
                  equal    : bool = False,
                  rng      : np.random.Generator | None = None) -> 'Network':
        # Import here to avoid circular import
        from evograph.genotype.crossover import crossover
        return crossover(network_a, network_b, equal, rng)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Serialize the network to plain records (JSON compatible).
        Self connections with weight 0 are left out.
        """
        self.reindex()
        return {
            "inputSize"  : self.input_size,
            "outputSize" : self.output_size,
            "nodes"      : [node.to_dict() for node in self.nodes],
            "connections": [conn.to_dict() for conn in self.connections
                            if not (conn.from_node is conn.to_node and conn.weight == 0)]
        }

    @staticmethod
    def from_dict(record: dict, rng: np.random.Generator | None = None) -> 'Network':
        """
        Recreate a network from its serialized form. Each node is placed at
        its recorded index (its list position if the record has none).

        Raises:
            SizeMismatchError: if the nodes do not match the declared input/output sizes
            ValueError:        if the node indices are not 0..n-1
        """
        network = Network._empty(int(record["inputSize"]), int(record["outputSize"]), rng)

        node_records = record["nodes"]
        indices      = [int(node_record.get("index", i)) for i, node_record in enumerate(node_records)]
        if sorted(indices) != list(range(len(node_records))):
            raise ValueError("the serialized node indices must be 0..n-1, each used once")

        network.nodes = [None] * len(node_records)
        for index, node_record in zip(indices, node_records):
            network.nodes[index] = Node.from_dict(node_record, network.rng)
        network.reindex()

        if len(network.input_nodes) != network.input_size or len(network.output_nodes) != network.output_size:
            raise SizeMismatchError("the serialized nodes do not match the declared input/output sizes")

        nodes = network.nodes
        for conn_record in record["connections"]:
            conn = network.connect(nodes[conn_record["fromIndex"]],
                                   nodes[conn_record["toIndex"]],
                                   conn_record["weight"])
            gate_index = conn_record.get("gateNodeIndex")
            if gate_index is not None:
                network.add_gate(nodes[gate_index], conn)

        return network

    def copy(self) -> 'Network':
        return Network.from_dict(self.to_dict(), self.rng)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def visualize(self, view: bool = False) -> graphviz.Digraph:
        """
        Visualize the network using Graphviz.

        Gated connections are drawn dashed and labeled with the index of
        their gating node.

        Parameters:
            view: If True, automatically open the visualization after rendering

        Returns:
            graphviz.Digraph object representing the network
        """
        self.reindex()
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')  # Left to right layout
        dot.attr('graph', labelloc='t')

        base_attrs = {'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5',
                      'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'}
        fill = {NodeType.INPUT: 'lightgrey', NodeType.HIDDEN: 'lightblue', NodeType.OUTPUT: 'white'}

        clusters = [('cluster_input' , 'Inputs' , 'source', self.input_nodes),
                    ('cluster_hidden', 'Hidden' , 'same'  , self.hidden_nodes),
                    ('cluster_output', 'Outputs', 'sink'  , self.output_nodes)]
        for name, label, rank, nodes in clusters:
            if not nodes:
                continue
            with dot.subgraph(name=name) as cluster:
                cluster.attr(rank=rank, label=label, style='invisible')
                for node in nodes:
                    attrs = dict(base_attrs, fillcolor=fill[node.type])
                    if isinstance(node, PoolNode):
                        attrs['shape'] = 'square'
                    code = activation_codes.get(activation_name(node.squash), '?')
                    attrs['label'] = f"{node.index}\\n{code}\\nb={node.bias:.2f}"
                    cluster.node(str(node.index), **attrs)

        for conn in self.connections:
            edge_attrs = {
                'label'     : f"w={conn.weight:.2f}",
                'fontsize'  : '5',
                'penwidth'  : '0.5',
                'arrowsize' : '0.5',
                'labelfloat': 'false',
                'color'     : 'black'
            }
            if conn.gate_node is not None:
                edge_attrs['style'] = 'dashed'
                edge_attrs['label'] += f",g={conn.gate_node.index}"
            dot.edge(str(conn.from_node.index), str(conn.to_node.index), **edge_attrs)

        if view:
            dot.view(cleanup=True)

        return dot

    def __repr__(self):
        return (f"Network(inputs={self.input_size}, outputs={self.output_size}, "
                f"nodes={len(self.nodes)}, connections={len(self.connections)}, gates={len(self.gates)})")
