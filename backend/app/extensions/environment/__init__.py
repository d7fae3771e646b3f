from .base import PluginEnvironment, PluginEnvironmentError
from .filesystem import FilesystemPluginEnvironment
from .memory import InMemoryPluginEnvironment
from .rest import RestPluginEnvironment
