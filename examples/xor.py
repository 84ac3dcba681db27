"""
XOR Problem solved by a layered network

Demonstrates the two ways a layernet network can be improved:
gradient descent (backpropagation) and a simple (1+λ) evolution
strategy built on clone and mutate.

The XOR Problem:
    Input (0, 0) → Output 0
    Input (0, 1) → Output 1
    Input (1, 0) → Output 1
    Input (1, 1) → Output 0

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

Usage:
    python examples/xor.py                     # train by backpropagation
    python examples/xor.py --evolve            # evolve by mutation
    python examples/xor.py --save xor.json     # save the final network
"""

import argparse
import logging
from pathlib import Path

from layernet         import Network
from layernet         import utility
from layernet.run     import Config

XOR_INPUTS  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
XOR_OUTPUTS = [[0.0],      [1.0],      [1.0],      [0.0]]

def fitness(network: Network) -> float:
    """Return 4.0 minus the summed squared error over the four XOR cases."""
    total = 4.0
    for inputs, expected in zip(XOR_INPUTS, XOR_OUTPUTS):
        output = network.forward(inputs)
        total -= (output[0] - expected[0]) ** 2
    return total

def train(network: Network, epochs: int) -> Network:
    for epoch in range(epochs):
        cost = sum(network.train(inputs, expected) for inputs, expected in zip(XOR_INPUTS, XOR_OUTPUTS))
        if epoch % 500 == 0:
            print(f"epoch {epoch:5d}  cost {cost:.5f}  fitness {fitness(network):.4f}")
    return network

def evolve(network: Network, generations: int, offspring: int = 8,
           probability: float = 0.3, severity: float = 0.5) -> Network:
    parent, best = network, fitness(network)
    for generation in range(generations):
        for _ in range(offspring):
            child = parent.mutate_new(probability, severity)
            score = fitness(child)
            if score > best:
                parent, best = child, score
        if generation % 100 == 0:
            print(f"generation {generation:5d}  fitness {best:.4f}")
    return parent

def report(network: Network):
    print(network)
    for inputs, expected in zip(XOR_INPUTS, XOR_OUTPUTS):
        output = network.forward_named({"a": inputs[0], "b": inputs[1]})
        print(f"  {inputs} → {output['xor']:.4f}  (target {expected[0]:.0f})")
    print(f"fitness: {fitness(network):.4f}")

def main():
    parser = argparse.ArgumentParser(description='Solve XOR with a layered network')
    parser.add_argument('--config', type=str, default=str(Path(__file__).parent / 'config_xor.ini'),
                        help='Path to the network INI file')
    parser.add_argument('--evolve', action='store_true',
                        help='Improve the network by mutation instead of backpropagation')
    parser.add_argument('--steps', type=int, default=3000,
                        help='Number of epochs (or generations when evolving)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the random number generator')
    parser.add_argument('--save', type=str, default=None,
                        help='Write the final network to this JSON file')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    utility.seed(args.seed)

    network = Config(args.config).build_network()
    if args.evolve:
        network = evolve(network, args.steps)
    else:
        network = train(network, args.steps)

    report(network)
    if args.save:
        network.save(args.save)
        print(f"Network saved to {args.save}")

if __name__ == '__main__':
    main()
