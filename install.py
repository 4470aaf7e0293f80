#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the ROS 2 Kilted installer.

Usage:
    python3 install.py [--variant desktop|ros-base] [--skip-upgrade] [--no-dev-tools]

Optional environment variables:
    ROS_VARIANT=desktop|ros-base   (default: desktop)
    INSTALL_DEV_TOOLS=1|0          (default: 1)
    SKIP_UPGRADE=1|0               (default: 0)
"""

import sys

from ros2_installer.main_installer import main

if __name__ == "__main__":
    sys.exit(main())
