"""
Whole-database replication (schema plus data, not log-based).
"""

from .orchestrator import ReplicationOrchestrator

__all__ = ['ReplicationOrchestrator']
