from tasklane.spec.dsl import TasksDSL

from . import help, networks, toolchain


def register(dsl: TasksDSL) -> None:
    """Defines the built-in tasks. Config files and plugins may override them."""
    help.register(dsl)
    networks.register(dsl)
    toolchain.register(dsl)
