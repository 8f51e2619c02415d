import sys

from projector_cast.cli import main

sys.exit(main())
