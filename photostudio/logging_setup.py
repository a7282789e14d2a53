import logging
import os
from typing import Optional

def setup_logging(level: str = "INFO", log_path: Optional[str] = None) -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    # create_app may run more than once per process (tests); keep one handler set
    for h in list(root.handlers):
        if getattr(h, "_photostudio", False):
            root.removeHandler(h)
            h.close()

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch._photostudio = True
    root.addHandler(ch)

    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setFormatter(fmt)
        fh._photostudio = True
        root.addHandler(fh)
