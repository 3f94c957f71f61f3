from .entity import *
from .feature_config import *
