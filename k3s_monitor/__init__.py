"""
K3s cluster health monitor

Aggregates node and workload health per component and serves it as a JSON
API and an HTML dashboard.
"""

__version__ = "1.0.0"
