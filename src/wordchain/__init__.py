"""
wordchain public package interface.
"""

from .codec import decode_model, encode_model, read_model, write_model
from .compiler import assign_indices, compile_model
from .configuration import (
    GenerationConfiguration,
    TrainingConfiguration,
    WordchainConfiguration,
    load_configuration,
)
from .errors import (
    CorruptDataError,
    EncodingError,
    GenerationError,
    ModelError,
    UsageError,
    WordchainError,
)
from .generation import ChainGenerator, generate_tokens
from .models import CompiledModel, ModelRow, ProbabilityEntry
from .tokens import END, START, Sentinel
from .training import TransitionGraph, build_graph

__all__ = [
    "__version__",
    "END",
    "START",
    "ChainGenerator",
    "CompiledModel",
    "CorruptDataError",
    "EncodingError",
    "GenerationConfiguration",
    "GenerationError",
    "ModelError",
    "ModelRow",
    "ProbabilityEntry",
    "Sentinel",
    "TrainingConfiguration",
    "TransitionGraph",
    "UsageError",
    "WordchainConfiguration",
    "WordchainError",
    "assign_indices",
    "build_graph",
    "compile_model",
    "decode_model",
    "encode_model",
    "generate_tokens",
    "load_configuration",
    "read_model",
    "write_model",
]

__version__ = "0.1.0"
