"""
The protocol package holds the data model for solver commands and
responses.
"""
from .command import *
from .response import *
