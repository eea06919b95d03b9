import sys

from devpulse.cli import main

sys.exit(main())
