"""Tool framework: import tool modules here to register them."""

# Import tool modules so their @registry.tool() decorators execute.
# Both stay registered when unconfigured: web_search reports "no engine
# configured" and recall returns nothing.
from src.tools import memory_tools, web_tools  # noqa: F401
from src.tools.registry import registry

__all__ = ["registry"]
