"""Allow running the CLI as: python -m tailor_skills"""

import sys

from tailor_skills.main import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
