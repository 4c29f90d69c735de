import sys

from wonbyte.cli import main

sys.exit(main())
