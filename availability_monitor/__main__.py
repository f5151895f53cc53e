"""Allow ``python -m availability_monitor``."""

from availability_monitor.cli import main

raise SystemExit(main())
