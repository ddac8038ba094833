from .contract import Contract
from .signature import Signature

__all__ = ['Contract', 'Signature']
