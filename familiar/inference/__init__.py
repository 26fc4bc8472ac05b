"""Inference engines."""

from familiar.inference.base import InferenceEngine
from familiar.inference.chat_model import ChatModelEngine, create_engine

__all__ = ["ChatModelEngine", "InferenceEngine", "create_engine"]
