"""
PR Code Reviewer

A service that scans the changes of GitHub pull requests with a fast,
explainable set of heuristic rules and reports findings and a quality score.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"
