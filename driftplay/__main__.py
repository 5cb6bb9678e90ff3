import sys

from .driftplay import main

sys.exit(main())
