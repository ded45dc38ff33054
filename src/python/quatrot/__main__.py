import sys

from quatrot.cli import main

sys.exit(main())
