"""
The flagengine module contains the most common top-level entry points for the engine.
"""

from flagengine.impl.util import log
from flagengine.version import VERSION

from .client import *
from .context import *
from .evaluation import *

__version__ = VERSION


__all__ = ['Config', 'EvaluationResult', 'FeatureClient', 'FeatureNotFound', 'SimulationBucket', 'UserContext', 'parse_attributes', 'client', 'config', 'context', 'evaluation']
