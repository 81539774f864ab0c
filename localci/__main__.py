import sys

from localci.cli import main

sys.exit(main())
