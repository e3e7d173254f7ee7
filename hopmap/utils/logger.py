import sys
from datetime import datetime
from functools import partial
from types import SimpleNamespace

from rich import print as rprint
from rich.markup import escape

from hopmap.utils.definitions import is_verbose_env

log_file = None


def open_log_file(filename):
    global log_file
    log_file = open(filename, "a")


def close_log_file():
    global log_file
    if log_file is not None:
        log_file.close()
        log_file = None


def log(msg, LEVEL="INFO", color="white", write_to_file=True, write_to_stderr=True, *args, **kwargs):
    if args or kwargs:
        msg = msg.format(*args, **kwargs)
    level_prefix = ("[" + LEVEL.upper() + "]").ljust(7)
    now = datetime.now().strftime("%H:%M:%S")
    if write_to_file and log_file:
        log_file.write(f"{now} {level_prefix} {msg}\n")
        log_file.flush()
    if write_to_stderr:
        # hostnames and addresses may contain square brackets
        rprint(f"{now} {escape(level_prefix)} [{color}]{escape(str(msg))}[/]", flush=True, file=sys.stderr)


debug = partial(log, LEVEL="DEBUG", color="cyan")
info = partial(log, LEVEL="INFO", color="white")
warn = partial(log, LEVEL="WARN", color="yellow")
warning = partial(log, LEVEL="WARN", color="yellow")
error = partial(log, LEVEL="ERROR", color="red")


def exception(msg, print_traceback=True, write_to_file=False, *args, **kwargs):
    error(f"Exception: {msg}", write_to_file=write_to_file, *args, **kwargs)
    if print_traceback:
        import traceback

        if write_to_file and log_file:
            traceback.print_exc(file=log_file)
        else:
            traceback.print_exc()


# fs logs to the log file, and to stderr only when HOPMAP_VERBOSE=1
fs = SimpleNamespace(
    debug=partial(log, LEVEL="DEBUG", color="cyan", write_to_file=True, write_to_stderr=is_verbose_env),
    info=partial(log, LEVEL="INFO", color="white", write_to_file=True, write_to_stderr=is_verbose_env),
    warn=partial(log, LEVEL="WARN", color="yellow", write_to_file=True, write_to_stderr=is_verbose_env),
    warning=partial(log, LEVEL="WARN", color="yellow", write_to_file=True, write_to_stderr=is_verbose_env),
    error=partial(log, LEVEL="ERROR", color="red", write_to_file=True, write_to_stderr=is_verbose_env),
    exception=partial(exception, write_to_file=True, write_to_stderr=is_verbose_env),
    log=partial(log, write_to_file=True, write_to_stderr=is_verbose_env),
)
