"""Nanopublication converter for concept profile matching text-mining output."""

from .config import ConverterConfig, OutputSettings

__all__ = ["ConverterConfig", "OutputSettings"]
