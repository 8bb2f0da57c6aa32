"""
Network Node Module.

This module implements the computational units of a network: the Node class
and its PoolNode variant, together with the NodeType and PoolingType
enumerations.

A node computes activation(sum of weighted incoming activations + bias).
Besides its parameters it carries the per-step trace state needed for
backpropagation through recurrent and gated connections: eligibility traces
on every incoming connection, and extended traces for the nodes it
influences through the connections it gates.

Classes:
    NodeType:    Enumeration for node types (INPUT, HIDDEN, OUTPUT)
    PoolingType: Enumeration for pooling operations (MAX, AVG, MIN)
    Node:        A single node with bias, activation function and trace state
    PoolNode:    A hidden node that pools its incoming signals
"""

import numpy as np
from enum   import Enum
from typing import Callable

from evograph.activations        import activations, activation_name
from evograph.errors             import DuplicateConnectionError, ConnectionNotGatedError
from evograph.network.connection import Connection

class NodeType(Enum):
    """
    Nodes come in three types: input, hidden, output.
    The values are the strings used in the serialized form.
    """
    INPUT  = "INPUT"
    HIDDEN = "HIDDEN"
    OUTPUT = "OUTPUT"

class PoolingType(Enum):
    MAX_POOLING = "MAX_POOLING"
    AVG_POOLING = "AVG_POOLING"
    MIN_POOLING = "MIN_POOLING"

class Node:
    """
    A single computational unit of a network.

    Self connections are not part of the incoming/outgoing lists; a node keeps
    at most one of them in 'self_connection', and it feeds the previous state
    back into the current one.

    Public Attributes:
        type:                 Type of node (INPUT, HIDDEN or OUTPUT)
        bias:                 Bias added to the node's weighted input
        squash:               Activation function, f(x, derivative=False)
        index:                Position of the node in its network (assigned by the network)
        mask:                 Dropout mask (1 unless the node is dropped out)
        state:                Last raw (pre-activation) sum
        old:                  Raw sum of the step before the last
        activation:           Last output
        derivative:           Derivative of the activation function at 'state'
        incoming:             Connections ending at this node
        outgoing:             Connections starting at this node
        gated:                Connections gated by this node
        self_connection:      Connection from this node to itself (or None)
        error_responsibility: Total error signal of the node
        error_projected:      Error signal received through outgoing connections
        error_gated:          Error signal received through gated connections

    Public Methods:
        activate(input, trace):                      Compute the node's output
        propagate(target, rate, momentum, update):   Backpropagate the error, adjust weights and bias
        clear():                                     Reset the trace state
        connect(target, weight):                     Create a connection to another node (or itself)
        disconnect(target):                          Remove the connection to another node
        add_gate(connection):                        Start gating a connection
        remove_gate(connection):                     Stop gating a connection
        is_projecting_to(node):                      True if connected to 'node'
        is_projected_by(node):                       True if 'node' is connected to this node
        to_dict():                                   Serialize the node
    """

    def __init__(self,
                 node_type: NodeType = NodeType.HIDDEN,
                 bias     : float | None = None,
                 squash   : Callable | None = None,
                 rng      : np.random.Generator | None = None):
        """
        Create a node.
        If 'bias' is not specified, input nodes get 0 and all other
        nodes a random bias in [-0.1, 0.1].

        Parameters:
            node_type: Type of node (INPUT, HIDDEN or OUTPUT)
            bias:      Bias value added to the node's weighted input
            squash:    Activation function (default: logistic)
            rng:       Random generator used for the initial bias and new connections
        """
        self._rng = rng if rng is not None else np.random.default_rng()
        if bias is None:
            bias = 0.0 if node_type is NodeType.INPUT else self._rng.uniform(-0.1, 0.1)

        self.type   : NodeType   = node_type
        self.bias   : float      = float(bias)
        self.squash : Callable   = squash if squash is not None else activations["logistic"]
        self.index  : int | None = None
        self.mask   : float      = 1.0

        self.state      : float = 0.0
        self.old        : float = 0.0
        self.activation : float = 0.0
        self.derivative : float = 0.0

        self.incoming        : list[Connection]  = []
        self.outgoing        : list[Connection]  = []
        self.gated           : list[Connection]  = []
        self.self_connection : Connection | None = None

        self.error_responsibility : float = 0.0
        self.error_projected      : float = 0.0
        self.error_gated          : float = 0.0
        self.delta_bias_previous  : float = 0.0
        self.delta_bias_total     : float = 0.0

    # ------------------------------------------------------------------
    # Forward pass
    # ------------------------------------------------------------------

    def _self_factor(self) -> float:
        conn = self.self_connection
        if conn is None:
            return 0.0
        return conn.gain * conn.weight

    def activate(self, input: float | None = None, trace: bool = True) -> float:
        """
        Compute the node's output.

        If 'input' is given the node simply outputs it (this is how input
        nodes are fed). Otherwise the weighted sum of the incoming activations,
        the bias and the self connection contribution is squashed.
        With 'trace' the eligibility and extended traces needed by
        propagate() are updated.

        Parameters:
            input: Value to output as is (input nodes only)
            trace: Whether to update the traces used for backpropagation

        Returns:
            The node's activation
        """
        if input is not None:
            self.activation = float(input)
            return self.activation

        if not trace:
            return self._activate_no_trace()

        self.old   = self.state
        self.state = self._self_factor() * self.state + self.bias
        for conn in self.incoming:
            self.state += conn.from_node.activation * conn.weight * conn.gain

        self.activation = float(self.squash(self.state)) * self.mask
        self.derivative = float(self.squash(self.state, derivative=True))

        # Influence of this node on the state of every node it gates into
        influences: dict[Node, float] = {}
        for conn in self.gated:
            node = conn.to_node
            if node in influences:
                influences[node] += conn.weight * conn.from_node.activation
            else:
                old = node.old if node._is_self_gated_by(self) else 0.0
                influences[node] = conn.weight * conn.from_node.activation + old
            conn.gain = self.activation

        self_factor = self._self_factor()
        for conn in self.incoming:
            conn.eligibility = self_factor * conn.eligibility + conn.from_node.activation * conn.gain
            for node, influence in influences.items():
                if node in conn.xtrace:
                    conn.xtrace[node] = (node._self_factor() * conn.xtrace[node]
                                         + self.derivative * conn.eligibility * influence)
                else:
                    conn.xtrace[node] = self.derivative * conn.eligibility * influence

        return self.activation

    def _activate_no_trace(self) -> float:
        self.state = self._self_factor() * self.state + self.bias
        for conn in self.incoming:
            self.state += conn.from_node.activation * conn.weight * conn.gain

        self.activation = float(self.squash(self.state))
        for conn in self.gated:
            conn.gain = self.activation
        return self.activation

    def _is_self_gated_by(self, node: 'Node') -> bool:
        return self.self_connection is not None and self.self_connection.gate_node is node

    # ------------------------------------------------------------------
    # Backward pass
    # ------------------------------------------------------------------

    def _error_through(self, conn: Connection) -> float:
        """
        Error signal this node sends back through one of its incoming connections.
        """
        return self.error_responsibility * conn.weight * conn.gain

    def _compute_error(self, target: float | None):
        if self.type is NodeType.OUTPUT:
            self.error_responsibility = self.error_projected = target - self.activation
            return

        error = 0.0
        for conn in self.outgoing:
            error += conn.to_node._error_through(conn)
        self.error_projected = self.derivative * error

        error = 0.0
        for conn in self.gated:
            node      = conn.to_node
            influence = node.old if node._is_self_gated_by(self) else 0.0
            influence += conn.weight * conn.from_node.activation
            error     += node.error_responsibility * influence
        self.error_gated = self.derivative * error

        self.error_responsibility = self.error_projected + self.error_gated

    def propagate(self,
                  target  : float | None = None,
                  rate    : float = 0.3,
                  momentum: float = 0.0,
                  update  : bool  = True):
        """
        Backpropagate the error through this node.

        Output nodes take their error from 'target'; all other nodes collect
        it from the nodes they project to and the connections they gate.
        Weight and bias changes are accumulated, and applied (together with
        the momentum term) only when 'update' is true. Input nodes only
        compute their error signal.

        Parameters:
            target:   Desired output (output nodes only)
            rate:     Learning rate
            momentum: Fraction of the previous change added to the current one
            update:   Whether to apply the accumulated changes
        """
        if self.type is NodeType.OUTPUT and target is None:
            raise ValueError("output nodes need a target to propagate")

        self._compute_error(target)
        if self.type is NodeType.INPUT:
            return

        for conn in self.incoming:
            gradient = self.error_projected * conn.eligibility
            for node, value in conn.xtrace.items():
                gradient += node.error_responsibility * value

            conn.delta_weights_total += rate * gradient * self.mask
            if update:
                conn.delta_weights_total   += momentum * conn.delta_weights_previous
                conn.weight                += conn.delta_weights_total
                conn.delta_weights_previous = conn.delta_weights_total
                conn.delta_weights_total    = 0.0

        self.delta_bias_total += rate * self.error_responsibility
        if update:
            self.delta_bias_total   += momentum * self.delta_bias_previous
            self.bias               += self.delta_bias_total
            self.delta_bias_previous = self.delta_bias_total
            self.delta_bias_total    = 0.0

    def clear(self):
        """
        Reset all trace state and remembered activations.
        Gated connections get gain 0 until this node activates again.
        """
        for conn in self.incoming:
            conn.eligibility = 0.0
            conn.xtrace      = {}
        for conn in self.gated:
            conn.gain = 0.0

        self.error_responsibility = self.error_projected = self.error_gated = 0.0
        self.old = self.state = self.activation = 0.0

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def connect(self, target: 'Node', weight: float | None = None) -> Connection:
        """
        Connect this node to 'target' (which may be the node itself).

        Raises:
            DuplicateConnectionError: if the connection already exists
        """
        if self.is_projecting_to(target):
            raise DuplicateConnectionError(f"{self!r} is already connected to {target!r}")

        conn = Connection(self, target, weight, self._rng)
        if target is self:
            self.self_connection = conn
        else:
            self.outgoing.append(conn)
            target.incoming.append(conn)
        return conn

    def disconnect(self, target: 'Node') -> Connection | None:
        """
        Remove the connection from this node to 'target' (stripping its gate first).

        Returns:
            The removed connection, or None if there was none
        """
        if target is self:
            conn = self.self_connection
            self.self_connection = None
        else:
            conn = next((c for c in self.outgoing if c.to_node is target), None)
            if conn is not None:
                self.outgoing.remove(conn)
                target.incoming.remove(conn)

        if conn is not None and conn.gate_node is not None:
            conn.gate_node.remove_gate(conn)
        return conn

    def add_gate(self, conn: Connection):
        if conn.gate_node is not None:
            return
        conn.gate_node = self
        self.gated.append(conn)

    def remove_gate(self, conn: Connection):
        if conn.gate_node is not self:
            raise ConnectionNotGatedError(f"{conn!r} is not gated by {self!r}")
        self.gated.remove(conn)
        conn.gate_node = None
        conn.gain      = 1.0

    def is_projecting_to(self, node: 'Node') -> bool:
        if node is self:
            return self.self_connection is not None
        return any(conn.to_node is node for conn in self.outgoing)

    def is_projected_by(self, node: 'Node') -> bool:
        if node is self:
            return self.self_connection is not None
        return any(conn.from_node is node for conn in self.incoming)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "index"   : self.index,
            "bias"    : self.bias,
            "type"    : self.type.value,
            "squashId": activation_name(self.squash),
            "mask"    : self.mask
        }

    @staticmethod
    def from_dict(record: dict, rng: np.random.Generator | None = None) -> 'Node':
        """
        Recreate a node (a PoolNode if the record names a pooling type).
        """
        squash = activations[record["squashId"]]
        if "poolingType" in record:
            node = PoolNode(PoolingType(record["poolingType"]), rng=rng)
            node.bias   = float(record["bias"])
            node.squash = squash
        else:
            node = Node(NodeType(record["type"]), float(record["bias"]), squash, rng)
        node.mask = float(record.get("mask", 1.0))
        return node

    def __repr__(self):
        return f"{type(self).__name__}(index={self.index}, type={self.type.name}, bias={self.bias:.3f})"

class PoolNode(Node):
    """
    A hidden node that outputs the maximum, average or minimum of its incoming signals.

    Pool nodes have a fixed bias of 1 and the identity activation; their
    incoming connections and bias are not trained. During backpropagation a
    max or min pool sends its error only to the input that was selected in
    the last forward pass, while an average pool shares it equally.

    Public Attributes:
        pooling_type: The pooling operation (MAX_POOLING, AVG_POOLING or MIN_POOLING)
    """

    def __init__(self, pooling_type: PoolingType, rng: np.random.Generator | None = None):
        super().__init__(NodeType.HIDDEN, 1.0, activations["identity"], rng)
        self.pooling_type : PoolingType       = pooling_type
        self._selected    : Connection | None = None

    def activate(self, input: float | None = None, trace: bool = True) -> float:
        if input is not None:
            return super().activate(input, trace)

        self.old = self.state
        signals  = [conn.from_node.activation * conn.weight * conn.gain for conn in self.incoming]
        if not signals:
            self._selected = None
            self.state     = 0.0
        elif self.pooling_type is PoolingType.AVG_POOLING:
            self._selected = None
            self.state     = float(np.mean(signals))
        else:
            pick           = np.argmax if self.pooling_type is PoolingType.MAX_POOLING else np.argmin
            position       = int(pick(signals))
            self._selected = self.incoming[position]
            self.state     = signals[position]

        mask            = self.mask if trace else 1.0
        self.activation = float(self.squash(self.state)) * mask
        self.derivative = float(self.squash(self.state, derivative=True))
        for conn in self.gated:
            conn.gain = self.activation
        return self.activation

    def _error_through(self, conn: Connection) -> float:
        if self.pooling_type is PoolingType.AVG_POOLING:
            return self.error_responsibility * conn.weight * conn.gain / len(self.incoming)
        if conn is self._selected:
            return self.error_responsibility * conn.weight * conn.gain
        return 0.0

    def propagate(self,
                  target  : float | None = None,
                  rate    : float = 0.3,
                  momentum: float = 0.0,
                  update  : bool  = True):
        self._compute_error(target)

    def to_dict(self) -> dict:
        record = super().to_dict()
        record["poolingType"] = self.pooling_type.value
        return record
