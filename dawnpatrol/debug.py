# ABOUTME: Debug logging helper gated on the DEBUG env var
# ABOUTME: Prints tagged lines to stdout so they show up in container logs

from dawnpatrol.config import Config


def debug_log(message: str, component: str = "APP") -> None:
    """Print a debug line when DEBUG=true, otherwise do nothing."""
    if Config.DEBUG:
        print(f"[{component}] {message}", flush=True)
