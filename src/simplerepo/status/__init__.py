"""Three-way status.

Classes:
    StatusEngine: Compares HEAD, index and working tree

Functions:
    classify: Pure classification of one path

Models:
    StatusRecord: Status of one path
"""

from ._classify import Classification, classify
from ._engine import StatusEngine
from ._models import StatusRecord

__all__ = ["Classification", "StatusEngine", "StatusRecord", "classify"]
