from tasklane.common.messaging import bus
from tasklane.spec import types
from tasklane.spec.dsl import TasksDSL
from tasklane.toolchain.cargo import (
    DEFAULT_MARKER_DEPENDENCY,
    filter_contract_packages,
    get_resolved_workspace,
)

from .task_names import TASK_COMPILE_GET_CONTRACT_PACKAGES, TASK_CONTRACTS


async def get_contract_packages(args, env, run_super):
    find_dir = args.get("find_dir") or env.config.paths.root
    metadata = await get_resolved_workspace(find_dir)
    return filter_contract_packages(metadata, args["marker"]).packages


async def print_contracts(args, env, run_super):
    packages = await env.run(TASK_COMPILE_GET_CONTRACT_PACKAGES)
    if not packages:
        bus.info("contracts.none")
        return
    for package in packages:
        bus.info(
            "contracts.entry",
            name=package.name,
            version=package.version,
            manifest_path=package.manifest_path,
        )


def register(dsl: TasksDSL) -> None:
    dsl.define_internal_task(
        TASK_COMPILE_GET_CONTRACT_PACKAGES,
        "Returns the workspace packages that are contracts",
        get_contract_packages,
    ).add_optional_param(
        "marker",
        "Dependency that marks a package as a contract",
        DEFAULT_MARKER_DEPENDENCY,
    ).add_optional_param(
        "find_dir", "Directory holding the workspace's Cargo.toml", type=types.string
    )

    dsl.define_task(
        TASK_CONTRACTS, "Lists the contract packages of the workspace", print_contracts
    )
