"""
XOR Problem Solved by Evolution

This script evolves a network for the XOR (exclusive OR) function with
NEAT, starting from a network whose two inputs are directly connected to
its single output. XOR is not linearly separable, so evolution has to add
at least one hidden node before the error can drop to the target.

The XOR Problem:
    Input (0, 0) → Output 0
    Input (0, 1) → Output 1
    Input (1, 0) → Output 1
    Input (1, 1) → Output 0

Evolution parameters are read from config_xor.ini (next to this script).
The evolved network is saved as JSON and rendered with Graphviz.

Usage:
    python examples/evolve_xor.py
"""

import logging
import numpy as np
from pathlib import Path

from evograph             import Network, Config, save_network_json
from evograph.activations import logistic_activation

XOR_DATASET = [{"input": [0.0, 0.0], "output": [0.0]},
               {"input": [0.0, 1.0], "output": [1.0]},
               {"input": [1.0, 0.0], "output": [1.0]},
               {"input": [1.0, 1.0], "output": [0.0]}]

def report(network: Network):
    print(f"{'Input':>10}  {'Output':>8}  {'Target':>6}")
    for example in XOR_DATASET:
        output = network.activate(example["input"], trace=False)[0]
        print(f"{str(example['input']):>10}  {output:8.4f}  {example['output'][0]:6.1f}")

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")

    here    = Path(__file__).parent
    config  = Config(str(here / "config_xor.ini"))
    network = Network(2, 1, rng=np.random.default_rng(7))
    for node in network.output_nodes:
        node.squash = logistic_activation

    result = network.evolve(XOR_DATASET, config)
    print(f"Error {result['error']:.4f} after {result['iterations']} generations ({result['time']:.1f}s)")
    print(network)
    report(network)

    save_network_json(network, str(here / "xor_network.json"), meta={"error": result["error"]})
    network.visualize().render(str(here / "xor_network"), format="png", cleanup=True)

if __name__ == "__main__":
    main()
