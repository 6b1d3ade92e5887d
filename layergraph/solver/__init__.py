from .Solver import Solver
from .SolverSGD import SolverSGD
from .SolverRMSprop import SolverRMSprop
from .SolverAdam import SolverAdam


def get_solver(name, *args, **kwargs):
    """Factory function to create solvers by name."""
    solvers = {
        "sgd": SolverSGD,
        "rmsprop": SolverRMSprop,
        "adam": SolverAdam,
    }

    if name not in solvers:
        raise ValueError(f"Unknown solver: {name}. Available: {list(solvers.keys())}")

    return solvers[name](*args, **kwargs)


__all__ = [
    "Solver",
    "SolverSGD",
    "SolverRMSprop",
    "SolverAdam",
    "get_solver",
]
