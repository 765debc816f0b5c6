import sys

from ai_db_chat.cli import main

sys.exit(main())
