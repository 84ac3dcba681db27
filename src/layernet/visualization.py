"""
LayerNet Visualization Module

Renders the topology of a network with Graphviz, one cluster per layer.

Functions:
    visualize(network, filename, view, show_weights): Build (and optionally open) the graph
"""

from typing import TYPE_CHECKING

import graphviz  # type: ignore

from layernet.topology import LayerKind

if TYPE_CHECKING:
    from layernet.network import Network

_node_attrs = {
    LayerKind.INPUT       : {'fillcolor': 'lightgrey', 'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5', 'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'},
    LayerKind.INTERMEDIATE: {'fillcolor': 'lightblue', 'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5', 'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'},
    LayerKind.OUTPUT      : {'fillcolor': 'white'    , 'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5', 'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'}
}

def _node_name(position: int, index: int) -> str:
    return f"L{position}N{index}"

def visualize(network     : 'Network',
              filename    : str  = "network",
              view        : bool = False,
              show_weights: bool = True) -> graphviz.Digraph:
    """
    Visualize the network using Graphviz.

    Each layer is drawn as a column labelled with its kind and the 3-letter
    code of its activation; edges are coloured by the sign of the weight.

    Parameters:
        network:      the network to draw
        filename:     output file name (without extension), used if 'view' is True
        view:         if True, render the graph and open it
        show_weights: if True, label each edge with its weight

    Returns:
        graphviz.Digraph object representing the network
    """
    dot = graphviz.Digraph(name=filename)
    dot.attr(rankdir='LR')  # Left to right layout
    dot.attr('graph', labelloc='t')

    for layer in network.layers:
        with dot.subgraph(name=f'cluster_{layer.position}') as cluster:
            cluster.attr(rank='same', label=f'{layer.kind.name.title()} [{layer.activation_type.code}]',
                         fontsize='6', style='dashed', color='lightgrey')
            for neuron in layer:
                attrs = _node_attrs[layer.kind].copy()
                name  = neuron.alias if neuron.alias is not None else str(neuron.index)
                if layer.kind is LayerKind.INPUT:
                    attrs['label'] = name
                else:
                    attrs['label'] = f"{name}\\nbias={neuron.bias:.2f}"
                cluster.node(_node_name(layer.position, neuron.index), **attrs)

    for previous, layer in zip(network.layers[:-1], network.layers[1:]):
        for j in range(layer.size):
            for k in range(previous.size):
                weight = layer.weights[j, k]
                edge_attrs = {
                    'color'    : 'blue' if weight > 0 else 'red',
                    'penwidth' : str(min(abs(weight) * 0.5, 2.5)),
                    'arrowsize': '0.3'
                }
                if show_weights:
                    edge_attrs['label']    = f"{weight:.2f}"
                    edge_attrs['fontsize'] = '5'
                dot.edge(_node_name(previous.position, k), _node_name(layer.position, j), **edge_attrs)

    if view:
        dot.view(cleanup=True)

    return dot
