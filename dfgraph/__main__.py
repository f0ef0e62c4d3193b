import sys

from dfgraph.cli import main

sys.exit(main())
