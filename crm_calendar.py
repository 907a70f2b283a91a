#!/usr/bin/env python3
"""
CRM Calendar - A PySide6 desktop calendar for CRM tasks.

This is the main entry point for the application.
"""

import sys
import argparse
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from calendar_backend.config import Config, EXAMPLE_CONFIG
from calendar_backend.log import set_debug
from calendar_backend.task_store import TaskStore, TaskStoreError
from calendar_gui.main_window import MainWindow


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="CRM Calendar - Month, week and day views of CRM tasks"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "--tasks",
        type=Path,
        help="CRM data file (JSON); overrides the configured tasks_file"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    return parser.parse_args()


def load_config(args) -> Config:
    """Load the configuration, exiting with an example when none exists."""
    try:
        config = Config.load(args.config)
    except FileNotFoundError as e:
        if args.tasks is None:
            print(f"Error: {e}")
            print("\nPlease create a configuration file at:")
            print(f"  - {Config.get_default_config_path()}")
            print("\nExample configuration:")
            print(EXAMPLE_CONFIG)
            sys.exit(1)
        config = Config.default()
    except Exception as e:
        print(f"Error loading configuration: {e}")
        sys.exit(1)

    if args.tasks is not None:
        config.tasks_file = args.tasks.expanduser()
    return config


def main():
    """Main entry point."""
    args = parse_args()
    set_debug(args.debug)

    config = load_config(args)

    task_store = TaskStore(config.tasks_file)
    try:
        count = task_store.load()
    except TaskStoreError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.debug:
        print(f"Loaded configuration from: {args.config or Config.get_default_config_path()}")
        print(f"  Tasks file: {config.tasks_file} ({count} tasks)")

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName("CRM Calendar")
    app.setApplicationVersion("0.1")

    # Set application style
    app.setStyle("Fusion")

    # Create and show main window
    window = MainWindow(config, task_store)
    window.show()

    # Run event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
