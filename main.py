#!/usr/bin/env python3
"""
Main entry point for the Twitch chat session client
"""

import sys

from twitch_chat.main import main

if __name__ == "__main__":
    sys.exit(main())
