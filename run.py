#!/usr/bin/env python3
"""Run script for the tasksync console client."""

from tasksync.console import main

if __name__ == "__main__":
    main()
