#!/usr/bin/env python3
"""
Utility script to visualize a saved layernet network.

Usage:
    python scripts/visualize_network.py --network saved_network.json
"""

import argparse
import sys

from layernet        import Network
from layernet.errors import SerializationError


def main():
    parser = argparse.ArgumentParser(description='Visualize a layered neural network')
    parser.add_argument('--network', type=str, required=True,
                        help='Path to the JSON network document')
    parser.add_argument('--output', type=str, default='network',
                        help='Output filename (without extension)')
    parser.add_argument('--no-weights', action='store_true',
                        help='Do not label the edges with their weights')
    parser.add_argument('--no-view', action='store_true',
                        help='Do not automatically open the generated file')

    args = parser.parse_args()

    try:
        network = Network.load(args.network)
    except (FileNotFoundError, SerializationError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    dot = network.visualize(args.output, show_weights=not args.no_weights)
    dot.render(args.output, view=not args.no_view, cleanup=True)
    print(f"Network visualization saved to {args.output}")


if __name__ == '__main__':
    main()
