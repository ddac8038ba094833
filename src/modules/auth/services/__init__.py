from .context_service import ContextService

__all__ = ['ContextService']
