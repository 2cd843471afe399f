import sys

from mission_trajectories.cli import main

sys.exit(main())
