import sys

from incremental_tree.cli import main


sys.exit(main())
