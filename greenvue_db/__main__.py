import sys

from greenvue_db.cli import main

sys.exit(main())
