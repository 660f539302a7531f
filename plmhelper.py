#!/usr/bin/env python
"""
Thin wrapper script to invoke the plm_helper CLI.

Running ``python plmhelper.py`` is equivalent to running the
``plmhelper`` console script installed via ``pyproject.toml``.
"""

from plm_helper.cli import main


if __name__ == "__main__":
    main(prog_name="plmhelper")
