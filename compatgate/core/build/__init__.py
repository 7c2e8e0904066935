from .config import InvocationConfig
from .gate import BuildGate
from .models import BuildOutcome, SkippedIncompatible

__all__ = ["BuildGate", "BuildOutcome", "InvocationConfig", "SkippedIncompatible"]
