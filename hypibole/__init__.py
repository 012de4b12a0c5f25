"""hypibole package: whitelisted GPIO get/set over HTTP, with simulated pins."""

__all__ = [
    "config",
    "daemon",
    "executor",
    "gpio",
    "http_server",
    "launcher",
    "operations",
    "pins",
    "pinset",
    "registry",
    "response",
]
