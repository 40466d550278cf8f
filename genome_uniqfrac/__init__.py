"""Coordinates of k-mers that occur at a single locus in a genome."""

from .config import Config
from . import kmer
from . import utils

__version__ = '0.1.0'
