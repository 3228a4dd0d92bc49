from __future__ import annotations

import sys

from aadat_bg_worker.celery_app import celery_app, choose_broker_url
from aadat_bg_worker import streaks_worker  # noqa: F401  registers tasks


def main() -> None:
    celery_app.conf.broker_url = choose_broker_url()
    argv = ["worker", "--beat", "--loglevel=info"]
    if sys.platform.startswith("win"):
        argv += ["-P", "solo"]
    celery_app.worker_main(argv)


if __name__ == "__main__":
    main()
