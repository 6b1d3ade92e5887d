from .Tensor import Tensor
from .State import State
from .Param import Param
from .Model import Model
from .layers import Layer, Dropout, EltwiseMult, create_layer
from .solver import Solver, SolverSGD, SolverRMSprop, SolverAdam, get_solver
from .helpers.Backend import backend
from .helpers.log import LogLevel, CheckError, report, check

__version__ = "0.1.0"

__all__ = [
    "Tensor",
    "State",
    "Param",
    "Model",
    "Layer",
    "Dropout",
    "EltwiseMult",
    "create_layer",
    "Solver",
    "SolverSGD",
    "SolverRMSprop",
    "SolverAdam",
    "get_solver",
    "backend",
    "LogLevel",
    "CheckError",
    "report",
    "check",
]
