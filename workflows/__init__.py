"""
Workflows Package
Multi-step process workflows for TantalusBot
"""

from .resolution_workflow import ResolutionExecutor

__all__ = ['ResolutionExecutor']
