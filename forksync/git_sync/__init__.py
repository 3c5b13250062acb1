"""Git synchronization functionality for forksync."""

from .backend import GitBackend, GitPythonBackend
from .orchestrator import SyncContext, SyncOrchestrator, SyncOutcome, sync_fork
from .repository_info import DivergenceReport, RemoteConfig, RepositoryContext, SyncState
from .utils import SyncResult, create_sync_result

__all__ = [
    'GitBackend',
    'GitPythonBackend',
    'SyncContext',
    'SyncOrchestrator',
    'SyncOutcome',
    'sync_fork',
    'DivergenceReport',
    'RemoteConfig',
    'RepositoryContext',
    'SyncState',
    'SyncResult',
    'create_sync_result',
]
