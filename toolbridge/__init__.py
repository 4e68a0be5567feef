"""ToolBridge — chat server that lets a language model call local tools."""
__version__ = "1.0.0"
