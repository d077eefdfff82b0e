# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "voxnav",
# ]
#
# [tool.uv.sources]
# voxnav = { path = "." }
# ///
"""Wake-word voice navigation over transcripts piped on stdin."""

from voxnav.apps.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
