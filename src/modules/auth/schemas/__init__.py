from .context_schemas import HostContext

__all__ = ['HostContext']
