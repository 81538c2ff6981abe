import sys

from toolchain_probe.runner import main

sys.exit(main())
