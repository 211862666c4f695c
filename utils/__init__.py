"""
Utils Package
Utility functions and helpers for TantalusBot
"""

from .embeds import EmbedTemplates
from .validators import Validators
from .role_utils import RoleManager

__all__ = ['EmbedTemplates', 'Validators', 'RoleManager']
