from .retention_cleanup import run_retention_cleanup, start_cleanup_job

__all__ = ['run_retention_cleanup', 'start_cleanup_job']
