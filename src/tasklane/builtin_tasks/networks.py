from tasklane.common.messaging import bus
from tasklane.spec.dsl import TasksDSL

from .task_names import TASK_NETWORKS


async def list_networks(args, env, run_super):
    for name, network_config in env.config.networks.items():
        bus.info(
            "networks.entry",
            marker="*" if name == env.network.name else " ",
            name=name,
            endpoint=network_config.endpoint,
        )


def register(dsl: TasksDSL) -> None:
    dsl.define_task(TASK_NETWORKS, "Lists the configured networks", list_networks)
