import os

MS = 1000.0

is_verbose_env = os.environ.get("HOPMAP_VERBOSE", None) == "1"

USER_AGENT = "hopmap-python"


def format_delay(delay_ms: float) -> str:
    if delay_ms < 1:
        return f"{delay_ms * MS:.0f}us"
    elif delay_ms < MS:
        return f"{delay_ms:.2f}ms"
    else:
        return f"{delay_ms / MS:.2f}s"
