"""
Policy Wallet: personal insurance portfolio engine.

Policy lifecycle status, coverage and premium rollups, and the Thai personal
income tax deduction estimate.
"""

__version__ = "1.1.0"
