import logging, functools, time
TRACE_LEVEL_NUM = 5
logging.addLevelName(TRACE_LEVEL_NUM, "TRACE")

class _TraceLogger(logging.Logger):
    def trace(self, msg, *a, **k):
        if self.isEnabledFor(TRACE_LEVEL_NUM):
            self._log(TRACE_LEVEL_NUM, msg, a, **k)
logging.setLoggerClass(_TraceLogger)

_FMT = "%(asctime)s | %(levelname)s | %(name)s | station=%(station)s rule=%(rule)s | %(message)s"
_DATE = "%Y-%m-%d %H:%M:%S"

class _Station(logging.Filter):
    def filter(self, r):
        if not hasattr(r, "station"): r.station = "-"
        if not hasattr(r, "rule"): r.rule = "-"
        return True

def setup_logging(level: int | str = logging.INFO):
    if isinstance(level, str):
        lvl = logging.getLevelName(level.upper())
        level = lvl if isinstance(lvl, int) else logging.INFO
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(_FMT, _DATE))
    h.addFilter(_Station())
    root.addHandler(h)

def _fmt(v):
    if isinstance(v, float):
        return f"{v:.6g}"
    return type(v).__name__ if hasattr(v, "__dataclass_fields__") else repr(v)

def _trace(log, msg, extra):
    # loggers created before the class swap are plain Loggers
    if log.isEnabledFor(TRACE_LEVEL_NUM):
        log.log(TRACE_LEVEL_NUM, msg, extra=extra)

def trace_calls(name: str | None = None, values: bool = False):
    def _wrap(fn):
        qual = name or f"{fn.__module__}.{fn.__qualname__}"
        log = logging.getLogger(qual)
        @functools.wraps(fn)
        def _inner(*a, **k):
            extra = {"station": k.get("station", "-"), "rule": fn.__name__}
            _trace(log, "enter", extra)
            if values:
                arg_s = ", ".join([*map(_fmt, a),
                                   *[f"{kk}={_fmt(v)}" for kk, v in k.items()]])
                _trace(log, f"args: {arg_s}", extra)
            t0 = time.perf_counter()
            try:
                out = fn(*a, **k)
            except Exception as e:
                log.error(f"exit err: {e}", extra=extra)
                raise
            dt = (time.perf_counter() - t0) * 1000
            if values:
                _trace(log, f"ret: {_fmt(out)}", extra)
            _trace(log, f"exit ok in {dt:.2f} ms", extra)
            return out
        return _inner
    return _wrap
