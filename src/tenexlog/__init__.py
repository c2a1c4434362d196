"""tenexlog - summary statistics and explainable anomalies for TSV access logs."""

from tenexlog.__version__ import __version__
from tenexlog.analyzer import analyze_source
from tenexlog.settings import AnalysisSettings


__all__ = ['AnalysisSettings', '__version__', 'analyze_source']
