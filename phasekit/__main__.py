import sys

from phasekit.cli import main

raise SystemExit(main(sys.argv[1:]))
