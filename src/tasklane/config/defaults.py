DEFAULT_NETWORK_NAME = "development"

DEFAULT_CONFIG = {
    "default_network": DEFAULT_NETWORK_NAME,
    "networks": {
        DEFAULT_NETWORK_NAME: {
            "endpoint": "ws://127.0.0.1:9944",
            "types": {},
        },
    },
    "paths": {
        "sources": "contracts",
        "artifacts": "artifacts",
        "tests": "tests",
        "cache": "cache",
    },
    "toolchain": {
        "channel": "nightly",
    },
}

DEFAULT_TIMEOUT = 60.0
