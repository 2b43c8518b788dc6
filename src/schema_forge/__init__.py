"""
Generate function/tool calling JSON schemas for LLM APIs from extracted
record and enumeration descriptors.
"""

__version__ = "0.3.0"
