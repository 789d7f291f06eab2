# Data module
from .pipeline import prepare_dataset
from .demo import generate_demo_farms

__all__ = [
    "prepare_dataset",
    "generate_demo_farms",
]
