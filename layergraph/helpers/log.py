# layergraph/helpers/log.py
"""
Console reporting and invariant checks.

report() prints a level-tagged line, check() reports and raises when a
construction-time invariant does not hold, log_msg() appends to a log
file and log_trace() prints debug traces when tracing is switched on.
"""
import os
import sys
import datetime

VERBOSE = True   # False silences INFO reports
TRACE = False    # True enables log_trace() output


class LogLevel:
    INFO = 0
    WARNING = 1
    ERROR = 2

    NAMES = {INFO: "INFO", WARNING: "WARNING", ERROR: "ERROR"}


class CheckError(ValueError):
    """Raised when a layer or solver is configured in a way it cannot run."""


def _format(msg, args):
    if msg is None:
        return ""
    return msg % args if args else msg


def report(level, msg=None, *args):
    """Report something. Errors go to stderr; nothing here stops the program."""
    if level == LogLevel.INFO and not VERBOSE:
        return
    text = f"[{LogLevel.NAMES.get(level, level)}] {_format(msg, args)}"
    stream = sys.stderr if level == LogLevel.ERROR else sys.stdout
    print(text, file=stream)


def check(condition, msg=None, *args):
    """Check something; report and raise CheckError when it is false."""
    if condition:
        return
    text = _format(msg, args) or "Check failed"
    report(LogLevel.ERROR, "%s", text)
    raise CheckError(text)


def set_trace(enabled):
    global TRACE
    TRACE = bool(enabled)


def log_trace(msg=None, *args):
    """Write a trace (debug only)."""
    if TRACE:
        print(f"[TRACE] {_format(msg, args)}")


def log_msg(log_file_path, msg=None, *args):
    """
    Append a timestamped line to a log file.

    Returns True when the line was written, False (after a warning) when the
    file could not be opened.
    """
    line = f"{datetime.datetime.now().isoformat(timespec='seconds')} {_format(msg, args)}\n"
    try:
        parent = os.path.dirname(log_file_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(log_file_path, "a") as f:
            f.write(line)
    except OSError as e:
        report(LogLevel.WARNING, "Could not write log file '%s': %s", log_file_path, e)
        return False
    return True
