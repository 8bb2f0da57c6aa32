"""
Error Conditions Module.

Each contract violation of the graph engine raises its own exception type,
so callers (and tests) can tell the causes apart. Every class derives from
the builtin exception a plain Python caller would expect, so catching
ValueError or KeyError keeps working.

Classes:
    SizeMismatchError:           Input/output arity does not match the network
    StoppingCriterionError:      Training or evolution has no way to terminate
    NodeNotInNetworkError:       A node is not part of the network being edited
    ConnectionNotInNetworkError: A connection is not part of the network being edited
    ConnectionNotGatedError:     Removing the gate of an ungated connection
    DuplicateConnectionError:    Connecting an already connected ordered pair
"""

class SizeMismatchError(ValueError):
    """
    Raised when data or a second network does not match a network's
    input/output sizes.
    """

class StoppingCriterionError(ValueError):
    """
    Raised when neither an iteration cap nor an error target was supplied.
    """

class NodeNotInNetworkError(KeyError):
    """
    Raised when an operation references a node the network does not own.
    """

class ConnectionNotInNetworkError(KeyError):
    """
    Raised when an operation references a connection the network does not own.
    """

class ConnectionNotGatedError(ValueError):
    """
    Raised when removing the gate of a connection that has none.
    """

class DuplicateConnectionError(ValueError):
    """
    Raised when connecting an ordered (from, to) pair that is already connected.
    """
