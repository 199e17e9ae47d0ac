"""
policywright - ABAC policy rule compiler, renderer and hydrator
"""

__version__ = "1.0.0"
