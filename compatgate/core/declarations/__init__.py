from .loader import Declarations, absolute_label, load_declarations, load_declarations_file
from .schema import DeclarationDocument

__all__ = [
    "DeclarationDocument",
    "Declarations",
    "absolute_label",
    "load_declarations",
    "load_declarations_file",
]
