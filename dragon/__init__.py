from dragon.stream_ciphers.all import *
from dragon.utilities.runtime import RUNTIME

__version__ = '0.1.0'
