"""
Repricing Tool Package

Internal tool for revising retail prices of a product catalog.
Suggests round prices for each product, tracks review status
(pending → approved/deferred → exported) and exports approved batches.
"""

__version__ = "1.0.0"
