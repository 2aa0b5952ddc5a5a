import sys

from pr_doc_agent.cli import main

sys.exit(main())
