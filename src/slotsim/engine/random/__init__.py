from .RandomGenerator import RandomGenerator
from .RandomManager import RandomManager

__all__ = ["RandomGenerator", "RandomManager"]
