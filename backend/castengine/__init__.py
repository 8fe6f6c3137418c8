"""
castengine - multi-provider LLM / TTS orchestration backend
"""

__version__ = "1.0.0"
