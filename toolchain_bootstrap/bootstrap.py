#!/usr/bin/env python3
"""
Main entrypoint for the Toolchain Bootstrap Tool
Delegates to the unified CLI in core/cli.py
"""
from toolchain_bootstrap.core.cli import cli

if __name__ == '__main__':
    cli()
