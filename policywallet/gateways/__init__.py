"""
Gateways to external collaborators.
"""

from policywallet.gateways.analysis_gateway import (
    AnalysisGateway,
    AnalysisProvider,
    AnalysisTask,
    build_portfolio_prompt,
    parse_json,
)

__all__ = [
    "AnalysisGateway",
    "AnalysisProvider",
    "AnalysisTask",
    "build_portfolio_prompt",
    "parse_json",
]
