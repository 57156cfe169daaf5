import sys

from defdeploy.cli import main

sys.exit(main())
