# ------------------------------------------------------------------------------------------------
# License
# ------------------------------------------------------------------------------------------------

# Copyright (c) 2025 LSeu-Open
#
# This code is licensed under the MIT License.
# See LICENSE file in the root directory

# ------------------------------------------------------------------------------------------------
# Description
# ------------------------------------------------------------------------------------------------

# This script is the main entry point for running the leaderboard scoring system
# from a source checkout. It forwards to the installed `score-leaderboards` command.
#
#   python score_leaderboards.py leaderboards Snapshots/example.json
#   python score_leaderboards.py curated Snapshots/example.json --min-coverage 50

# ------------------------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------------------------

from leaderboard_scoring.cli import main


if __name__ == "__main__":
    main()
