# src/retro_chip8/ui/app.py
"""
Qtアプリケーションのエントリポイント。
引数を解析し、設定を読み込んでメインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from .main_window import MainWindow

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="Run a CHIP-8 program.")
    parser.add_argument("rom", nargs="?", help="path to a raw CHIP-8 program")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    if args.rom:
        main_win.load_rom(args.rom)
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
