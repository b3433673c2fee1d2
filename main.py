#!/usr/bin/env python3
"""
ATA Secure Erase - erase disks with the ATA SECURITY ERASE UNIT command
Drives hdparm and checks the disk's security state around every step
"""

import sys
import os

# Add the current directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.cli.cli_interface import CLIInterface


def main(argv=None):
    """Main entry point for the application"""
    cli = CLIInterface()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
