TASK_HELP = "help"
TASK_NETWORKS = "networks"
TASK_CONTRACTS = "contracts"
TASK_COMPILE_GET_CONTRACT_PACKAGES = "compile:get-contract-packages"
