# ros2_installer/__init__.py
# -*- coding: utf-8 -*-
"""
ROS 2 Kilted Kaiju installer for Ubuntu 24.04 (Noble).
"""

__version__ = "0.1.0"
