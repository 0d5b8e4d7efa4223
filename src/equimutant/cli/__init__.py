"""
CLI Command Modules

mutations: random / guided / target / select / transforms
"""

from equimutant.cli import mutations

__all__ = ['mutations']
