import sys

from rss_digest.cli import main

sys.exit(main())
