"""Kernel security – caller identity."""
from docsearch.kernel.security.principal import Principal
from docsearch.kernel.security.security_context import SecurityContext

__all__ = ["Principal", "SecurityContext"]
