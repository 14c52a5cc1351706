"""
WiFi Optimizer Entry Point
===========================

Allows running the CLI via: python -m wifiopt
"""

from wifiopt.cli import main

if __name__ == "__main__":
    main()
