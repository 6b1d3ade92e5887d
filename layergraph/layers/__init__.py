from .Layer import Layer
from .Dropout import Dropout
from .EltwiseMult import EltwiseMult
from ..helpers.log import check

LAYERS = {
    "dropout": Dropout,
    "eltwise_mult": EltwiseMult,
}


def create_layer(kind, name, inputs, param=None):
    """Factory function to create layers by kind name."""
    check(kind in LAYERS, "Unknown layer kind: %s. Available: %s", kind, list(LAYERS.keys()))
    return LAYERS[kind](name, inputs, param)


__all__ = [
    "Layer",
    "Dropout",
    "EltwiseMult",
    "LAYERS",
    "create_layer",
]
