import sys

from hotspots.map_view.cli import main

sys.exit(main())
