"""
XOR Problem Solved by Backpropagation

This script builds a small layered model with the Architect (2 inputs,
a dense hidden layer of 4 tanh nodes, 1 logistic output) and trains it on
the XOR function by backpropagation with momentum and a step learning
rate policy.

Usage:
    python examples/train_xor.py
"""

import logging
import numpy as np

from evograph.activations import tanh_activation, logistic_activation
from evograph.layers      import Architect, InputLayer, DenseLayer, OutputLayer

XOR_DATASET = [{"input": [0.0, 0.0], "output": [0.0]},
               {"input": [0.0, 1.0], "output": [1.0]},
               {"input": [1.0, 0.0], "output": [1.0]},
               {"input": [1.0, 1.0], "output": [0.0]}]

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    rng = np.random.default_rng(3)

    network = (Architect()
               .add_layer(InputLayer(2, rng=rng))
               .add_layer(DenseLayer(4, activation=tanh_activation, rng=rng))
               .add_layer(OutputLayer(1, activation=logistic_activation, rng=rng))
               .build_model(rng))

    result = network.train(XOR_DATASET,
                           iterations=5000,
                           error=0.005,
                           rate=0.3,
                           momentum=0.5,
                           rate_policy="step",
                           rate_gamma=0.9,
                           rate_step_size=1000,
                           shuffle=True,
                           log=500)
    print(f"Error {result['error']:.5f} after {result['iterations']} iterations ({result['time']:.2f}s)")

    for example in XOR_DATASET:
        output = network.activate(example["input"], trace=False)[0]
        print(f"{example['input']} → {output:.4f} (target {example['output'][0]})")

if __name__ == "__main__":
    main()
