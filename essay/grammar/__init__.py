"""Regex-based grammar analysis."""
from essay.grammar.local_checker import LocalAnalysis, analyze
