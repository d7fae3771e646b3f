from .domain.models import (
    DisplayStatus,
    ExtensionAction,
    ExtensionDescriptor,
    ExtensionType,
    Preference,
    ResolvedExtension,
)
from .services.hooks import FilterChain
from .services.registry import ExtensionRegistry
